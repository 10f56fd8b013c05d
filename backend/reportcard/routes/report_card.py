"""
Report card route - name + ID login that returns the computed report.

Unknown IDs and wrong names are logged as different events by the identity
check but produce the same 401 body, so a caller cannot tell which half
of the credentials was wrong.
"""

import time
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from reportcard.errors import (
    AuthMismatch, StoreUnavailable, StudentNotFound,
    INVALID_CREDENTIALS_MESSAGE, MISSING_CREDENTIALS_MESSAGE,
)
from reportcard.logging_config import get_logger, log_with_context
from reportcard.routes.students import envelope, get_store
from reportcard.schemas import ReportCardRequest, serialize_student
from reportcard.services.grading import build_report
from reportcard.services.identity import verify_student
from reportcard.services.student_store import StudentStore

router = APIRouter()
logger = get_logger("grading")


@router.post("/api/report-card")
def report_card(request: ReportCardRequest, store: StudentStore = Depends(get_store)):
    """Verify name + ID and return the student's record with its report."""
    name = request.name.strip()
    student_id = request.id.strip()
    if not name or not student_id:
        return envelope(400, False, MISSING_CREDENTIALS_MESSAGE)

    try:
        student = verify_student(store, name, student_id)
    except (StudentNotFound, AuthMismatch):
        return envelope(401, False, INVALID_CREDENTIALS_MESSAGE)
    except StoreUnavailable as e:
        return JSONResponse(status_code=500,
                            content={"success": False, "message": "Server error", "error": str(e)})

    start_time = time.time()
    report = build_report(student.grades or [])
    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Report computed: {} subjects, composite {:.1f} ({})".format(
            len(report.rows), report.composite, report.composite_letter),
        context={"student_id": student.id},
        extra_data={"duration_ms": round(duration_ms, 2), "passing": report.passing})

    return envelope(200, True, "Report card generated", data={
        "student": serialize_student(student),
        "report": report.model_dump(mode="json"),
    })
