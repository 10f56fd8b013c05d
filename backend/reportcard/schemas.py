"""Request/response schemas for student records."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# A period score exactly as entered: a number, a numeric string, a blank
# string, free text ("absent", "N/A"), a boolean or null. Stored untouched;
# grading decides what counts as a number.
ScoreInput = Any

PERIOD_FIELDS = ("p1", "p2", "p3", "p4", "p5", "p6")


class GradeEntry(BaseModel):
    """
    One subject row on a report card.

    Unknown keys are kept rather than dropped, so a school can attach extra
    fields (teacher name, credits, ...) and get them back unchanged.
    """
    model_config = ConfigDict(extra="allow")

    subject: Optional[str] = None
    p1: ScoreInput = None
    p2: ScoreInput = None
    p3: ScoreInput = None
    p4: ScoreInput = None
    p5: ScoreInput = None
    p6: ScoreInput = None
    comment: Optional[str] = None

    @property
    def extras(self) -> Dict[str, Any]:
        """Fields beyond subject/p1..p6/comment."""
        return dict(self.model_extra or {})

    def periods(self) -> List[ScoreInput]:
        return [getattr(self, name) for name in PERIOD_FIELDS]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StudentCreate(CamelModel):
    id: str = Field(..., min_length=1, description="Student ID, chosen by the school")
    name: str = Field(..., min_length=1)
    class_name: Optional[str] = None
    roll_number: Optional[str] = None
    academic_year: Optional[str] = None
    principal_comment: Optional[str] = None
    school_name: Optional[str] = None
    school_address: Optional[str] = None
    is_archived: bool = False
    grades: List[GradeEntry] = Field(default_factory=list)


class StudentUpdate(CamelModel):
    """
    Partial update: only keys present in the body are applied.

    There is no `id` field, so an id sent in the body is ignored.
    """
    name: Optional[str] = None
    class_name: Optional[str] = None
    roll_number: Optional[str] = None
    academic_year: Optional[str] = None
    principal_comment: Optional[str] = None
    school_name: Optional[str] = None
    school_address: Optional[str] = None
    is_archived: Optional[bool] = None
    grades: Optional[List[GradeEntry]] = None

    @field_validator("name", "is_archived", "grades")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError("may not be null")
        if info.field_name == "name" and not value.strip():
            raise ValueError("name may not be blank")
        return value


class StudentOut(CamelModel):
    id: str
    name: str
    class_name: Optional[str] = None
    roll_number: Optional[str] = None
    academic_year: Optional[str] = None
    principal_comment: Optional[str] = None
    school_name: Optional[str] = None
    school_address: Optional[str] = None
    is_archived: bool = False
    grades: List[GradeEntry] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_orm_student(cls, student) -> "StudentOut":
        return cls(
            id=student.id,
            name=student.name,
            class_name=student.class_name,
            roll_number=student.roll_number,
            academic_year=student.academic_year,
            principal_comment=student.principal_comment,
            school_name=student.school_name,
            school_address=student.school_address,
            is_archived=bool(student.is_archived),
            grades=student.grades or [],
            created_at=student.created_at,
            updated_at=student.updated_at,
        )


def serialize_student(student) -> dict:
    """Serialize a Student ORM object to a camelCase dict for API responses."""
    return StudentOut.from_orm_student(student).model_dump(mode="json", by_alias=True)


class ReportCardRequest(BaseModel):
    """Login form: the student's name and ID."""
    name: str = ""
    id: str = ""
