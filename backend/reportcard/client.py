"""
Report card client - the student-facing side of the API.

ReportSession mirrors the login page: take a name and ID, fetch the record,
check the name locally, compute the report. The record being viewed lives
on the session object and is dropped by logout(); there is no module-level
state.
"""

import os
from typing import List, Optional
from urllib.parse import quote

import httpx

from reportcard.errors import (
    AuthMismatch, InvalidCredentials, MissingCredentials,
    StoreUnavailable, StudentNotFound,
)
from reportcard.logging_config import get_logger, log_with_context
from reportcard.services.grading import PLACEHOLDER, ReportCard, build_report
from reportcard.services.identity import check_identity

DEFAULT_API_URL = "http://localhost:8000"

logger = get_logger("client")


class ReportCardClient:
    """Thin httpx wrapper around the students API."""

    def __init__(self, base_url: str = None, http: httpx.Client = None, timeout: float = 30.0):
        self.base_url = (base_url or os.getenv("API_URL", DEFAULT_API_URL)).rstrip("/")
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=self.base_url, timeout=timeout)

    def fetch_student(self, student_id: str) -> dict:
        response = self.http.get("/api/students/{}".format(quote(student_id, safe="")))
        if response.status_code == 404:
            raise StudentNotFound(student_id)
        if response.status_code >= 500:
            raise StoreUnavailable("Server returned {}".format(response.status_code))
        response.raise_for_status()
        return response.json()

    def close(self):
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class ReportSession:
    """One student's viewing session."""

    def __init__(self, client: ReportCardClient):
        self.client = client
        self.current: Optional[dict] = None
        self.report: Optional[ReportCard] = None

    @property
    def logged_in(self) -> bool:
        return self.current is not None

    def login(self, name: str, student_id: str) -> ReportCard:
        """
        Fetch and verify the student's record, then compute the report.

        Raises MissingCredentials when either field is blank, and
        InvalidCredentials for every other failure (unknown ID, wrong name,
        server or network error). The real cause is only logged.
        """
        self.logout()
        name = (name or "").strip()
        student_id = (student_id or "").strip()
        if not name or not student_id:
            raise MissingCredentials()

        try:
            record = self.client.fetch_student(student_id)
            check_identity(record.get("name"), name, student_id)
        except (StudentNotFound, AuthMismatch, StoreUnavailable, httpx.HTTPError, ValueError) as e:
            log_with_context(logger, "WARNING", "Login failed: {}".format(e),
                             context={"student_id": student_id},
                             extra_data={"cause": type(e).__name__})
            raise InvalidCredentials(e) from e

        self.current = record
        self.report = build_report(record.get("grades") or [])
        return self.report

    def logout(self):
        self.current = None
        self.report = None


# Shown when a record has no academicYear
DEFAULT_ACADEMIC_YEAR = "Academic Year 2023-2024"

HEADERS = ["Subject", "P1", "P2", "P3", "Sem 1", "P4", "P5", "P6", "Sem 2", "Yearly", "Grade", "Comment"]


def _table(rows: List[List[str]]) -> List[str]:
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = []
    for index, row in enumerate(rows):
        cells = [row[0].ljust(widths[0])]
        cells += [cell.rjust(widths[i + 1]) for i, cell in enumerate(row[1:-1])]
        cells.append(row[-1])
        lines.append("  ".join(cells).rstrip())
        if index == 0:
            lines.append("-" * len(lines[0]))
    return lines


def render_report(student: dict, report: ReportCard) -> str:
    """Plain-text report card for the terminal."""
    lines = [
        student.get("schoolName") or "School Name Not Provided",
    ]
    if student.get("schoolAddress"):
        lines.append(student["schoolAddress"])
    lines += [
        student.get("academicYear") or DEFAULT_ACADEMIC_YEAR,
        "",
        "Name:  {}".format(student.get("name", "")),
        "ID:    {}".format(student.get("id", "")),
        "Class: {}".format(student.get("className") or "N/A"),
        "Roll:  {}".format(student.get("rollNumber") or "N/A"),
        "",
    ]

    rows = [HEADERS]
    rows += [row.cells() for row in report.rows]
    rows.append(["Average"] + report.footer_cells() + [PLACEHOLDER, ""])
    lines += _table(rows)

    lines += [
        "",
        "Overall: {} ({}) {}".format(
            report.composite_display, report.composite_letter,
            "PASS" if report.passing else "FAIL"),
        "Principal's remarks: {}".format(student.get("principalComment") or "No remarks provided."),
    ]
    return "\n".join(lines)
