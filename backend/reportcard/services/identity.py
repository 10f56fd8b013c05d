"""
Identity check for the report-card login.

A student proves who they are with their name and student ID. The stored
name and the claimed name must be equal ignoring case; nothing else is
normalised (no trimming, no fuzzy matching).
"""

from reportcard.errors import AuthMismatch, StudentNotFound
from reportcard.logging_config import get_logger, log_with_context

logger = get_logger("auth")


def names_match(claimed: str, stored: str) -> bool:
    """Case-insensitive equality on the full string."""
    if claimed is None or stored is None:
        return False
    return claimed.lower() == stored.lower()


def check_identity(record_name: str, claimed_name: str, student_id: str) -> None:
    """Raise AuthMismatch unless `claimed_name` matches the stored name."""
    if not names_match(claimed_name, record_name):
        log_with_context(logger, "WARNING", "Login rejected: name does not match ID",
                         context={"student_id": student_id})
        raise AuthMismatch(student_id)


def verify_student(store, name: str, student_id: str):
    """
    Resolve `student_id` through `store` and check the claimed name.

    Raises:
        StudentNotFound: no record with this ID
        AuthMismatch: the record exists but belongs to someone else
        StoreUnavailable: the store failed
    """
    try:
        student = store.get(student_id)
    except StudentNotFound:
        log_with_context(logger, "WARNING", "Login rejected: unknown student ID",
                         context={"student_id": student_id})
        raise

    check_identity(student.name, name, student_id)
    log_with_context(logger, "INFO", "Login accepted", context={"student_id": student_id})
    return student
