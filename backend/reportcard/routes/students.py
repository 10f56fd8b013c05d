"""
Students API routes - CRUD over student report-card records.

GET routes return the bare record (or list of records). Every other route
wraps its result in {success, message, data?}.
"""

import time
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from reportcard.database import get_db
from reportcard.errors import DuplicateStudent, StoreUnavailable, StudentNotFound
from reportcard.logging_config import get_logger, log_with_context
from reportcard.schemas import StudentCreate, StudentUpdate, serialize_student
from reportcard.services.student_store import StudentStore

router = APIRouter()
logger = get_logger("http")


def get_store(db: Session = Depends(get_db)) -> StudentStore:
    """FastAPI dependency wrapping the request's session in a StudentStore."""
    return StudentStore(db)


def envelope(status_code: int, success: bool, message: str, data=None, error: str = None):
    content = {"success": success, "message": message}
    if data is not None:
        content["data"] = data
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


@router.get("/api/students")
def list_students(store: StudentStore = Depends(get_store)):
    """List every student record."""
    start_time = time.time()
    try:
        students = store.list()
    except StoreUnavailable:
        return JSONResponse(status_code=500, content={"error": "Server error while fetching students"})

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO", "Listed {} students".format(len(students)),
                     extra_data={"duration_ms": round(duration_ms, 2)})
    return [serialize_student(s) for s in students]


@router.get("/api/students/{student_id}")
def get_student(student_id: str, store: StudentStore = Depends(get_store)):
    """Fetch one student record by ID."""
    try:
        student = store.get(student_id)
    except StudentNotFound:
        return JSONResponse(status_code=404, content={"error": "Student not found"})
    except StoreUnavailable:
        return JSONResponse(status_code=500, content={"error": "Server error while fetching student"})
    return serialize_student(student)


@router.post("/api/students", status_code=201)
def create_student(payload: StudentCreate, store: StudentStore = Depends(get_store)):
    """Create a student. The ID comes from the caller and must be new."""
    try:
        student = store.create(payload)
    except DuplicateStudent:
        return envelope(409, False, "A student with this ID already exists.")
    except StoreUnavailable as e:
        return envelope(500, False, "Failed to add student.", error=str(e))

    return envelope(201, True, "Student added successfully!", data=serialize_student(student))


@router.put("/api/students/{student_id}")
def update_student(student_id: str, payload: StudentUpdate, store: StudentStore = Depends(get_store)):
    """Replace the mutable fields present in the body. The ID never changes."""
    try:
        student = store.update(student_id, payload)
    except StudentNotFound:
        return envelope(404, False, "Student not found")
    except StoreUnavailable as e:
        return envelope(500, False, "Failed to update student.", error=str(e))

    return envelope(200, True, "Student data updated successfully", data=serialize_student(student))


@router.delete("/api/students/{student_id}")
def delete_student(student_id: str, store: StudentStore = Depends(get_store)):
    """Delete a student record."""
    try:
        store.delete(student_id)
    except StudentNotFound:
        return envelope(404, False, "Student not found")
    except StoreUnavailable as e:
        return envelope(500, False, "Failed to delete student.", error=str(e))

    return envelope(200, True, "Student deleted successfully.")
