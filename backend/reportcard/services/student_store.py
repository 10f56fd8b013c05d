"""
Student Store - create/read/update/delete over student records.

Every operation touches exactly one row, so the database's own row-level
atomicity is all the consistency needed. Any SQLAlchemy failure rolls the
session back and is re-raised as StoreUnavailable; callers never see a
driver exception.
"""

import time
from contextlib import contextmanager
from typing import List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from reportcard.errors import DuplicateStudent, StoreUnavailable, StudentNotFound
from reportcard.logging_config import get_logger, log_with_context
from reportcard.models.student import Student
from reportcard.schemas import StudentCreate, StudentUpdate

# Channel logger for database operations
logger = get_logger("db")

# StudentUpdate field -> Student column
UPDATABLE_FIELDS = (
    "name", "class_name", "roll_number", "academic_year", "principal_comment",
    "school_name", "school_address", "is_archived", "grades",
)


class StudentStore:
    """Record store backed by a SQLAlchemy session (one per request)."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str, student_id: str = None):
        start_time = time.time()
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            log_with_context(logger, "ERROR", "Store {} failed: {}".format(operation, str(e)),
                             context={"student_id": student_id},
                             extra_data={"error_type": type(e).__name__})
            raise StoreUnavailable("Database error during {}".format(operation)) from e
        duration_ms = (time.time() - start_time) * 1000
        log_with_context(logger, "DEBUG", "Store {} ok".format(operation),
                         context={"student_id": student_id},
                         extra_data={"duration_ms": round(duration_ms, 2)})

    def _find(self, student_id: str):
        return self.db.query(Student).filter(Student.id == student_id).first()

    def list(self) -> List[Student]:
        with self._guard("list"):
            return self.db.query(Student).order_by(Student.created_at, Student.id).all()

    def get(self, student_id: str) -> Student:
        with self._guard("get", student_id):
            student = self._find(student_id)
        if student is None:
            raise StudentNotFound(student_id)
        return student

    def create(self, payload: StudentCreate) -> Student:
        """Insert a new record; an existing id is rejected and left untouched."""
        with self._guard("create", payload.id):
            if self._find(payload.id) is not None:
                log_with_context(logger, "WARNING", "Rejected duplicate student id",
                                 context={"student_id": payload.id})
                raise DuplicateStudent(payload.id)

            student = Student(
                id=payload.id,
                name=payload.name,
                class_name=payload.class_name,
                roll_number=payload.roll_number,
                academic_year=payload.academic_year,
                principal_comment=payload.principal_comment,
                school_name=payload.school_name,
                school_address=payload.school_address,
                is_archived=payload.is_archived,
                grades=[entry.model_dump() for entry in payload.grades],
            )
            self.db.add(student)
            try:
                self.db.commit()
            except IntegrityError:
                # Lost a race with another create for the same id
                self.db.rollback()
                raise DuplicateStudent(payload.id)
            self.db.refresh(student)

        log_with_context(logger, "INFO", "Created student: {}".format(student.name),
                         context={"student_id": student.id},
                         extra_data={"subjects": len(student.grades or [])})
        return student

    def update(self, student_id: str, payload: StudentUpdate) -> Student:
        """Apply the fields present in `payload`; the id is never changed."""
        with self._guard("update", student_id):
            student = self._find(student_id)
            if student is None:
                raise StudentNotFound(student_id)

            changed = []
            for field in UPDATABLE_FIELDS:
                if field not in payload.model_fields_set:
                    continue
                value = getattr(payload, field)
                if field == "grades":
                    value = [entry.model_dump() for entry in value]
                setattr(student, field, value)
                changed.append(field)

            self.db.commit()
            self.db.refresh(student)

        log_with_context(logger, "INFO", "Updated student {}".format(student_id),
                         context={"student_id": student_id},
                         extra_data={"fields": changed})
        return student

    def delete(self, student_id: str) -> None:
        with self._guard("delete", student_id):
            student = self._find(student_id)
            if student is None:
                raise StudentNotFound(student_id)
            self.db.delete(student)
            self.db.commit()

        log_with_context(logger, "INFO", "Deleted student {}".format(student_id),
                         context={"student_id": student_id})
