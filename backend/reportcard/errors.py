"""
Domain errors and the global JSON error handler.

Store and identity failures are raised as the exceptions below and turned
into HTTP responses by the routes. NotFound and AuthMismatch stay separate
types so they can be logged apart, even though a student logging in only
ever sees INVALID_CREDENTIALS_MESSAGE.
"""

import traceback
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from reportcard.logging_config import get_logger, log_with_context

INVALID_CREDENTIALS_MESSAGE = "Invalid name or ID. Please try again."
MISSING_CREDENTIALS_MESSAGE = "Please enter both name and ID."

logger = get_logger("http")


class ReportCardError(Exception):
    """Base class for report-card domain errors."""


class StudentNotFound(ReportCardError):
    def __init__(self, student_id: str):
        super().__init__(f"Student {student_id!r} not found")
        self.student_id = student_id


class DuplicateStudent(ReportCardError):
    def __init__(self, student_id: str):
        super().__init__(f"A student with ID {student_id!r} already exists")
        self.student_id = student_id


class AuthMismatch(ReportCardError):
    """The claimed name does not belong to the student ID."""

    def __init__(self, student_id: str):
        super().__init__(f"Name does not match student {student_id!r}")
        self.student_id = student_id


class StoreUnavailable(ReportCardError):
    """The underlying database failed; never retried."""


class MissingCredentials(ReportCardError):
    def __init__(self):
        super().__init__(MISSING_CREDENTIALS_MESSAGE)


class InvalidCredentials(ReportCardError):
    """
    Generic login failure shown to the user.

    `cause` keeps the underlying error (not found, name mismatch, network)
    for logging only.
    """

    def __init__(self, cause: Exception = None):
        super().__init__(INVALID_CREDENTIALS_MESSAGE)
        self.cause = cause


def add_error_handlers(app: FastAPI):
    """Register the catch-all handler that keeps 500s in JSON form."""

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        log_with_context(logger, "ERROR", "Store unavailable: {}".format(exc),
                         extra_data={"path": request.url.path})
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Server error", "error": str(exc)}
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log_with_context(logger, "ERROR",
                         "Unhandled {} on {} {}".format(type(exc).__name__, request.method, request.url.path),
                         extra_data={"traceback": traceback.format_exc()})
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error", "error": str(exc)}
        )
