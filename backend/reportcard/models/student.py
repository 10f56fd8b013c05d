"""
Student model - one report-card record per student.

The primary key is the student ID handed out by the school, not a
generated UUID. Grade entries are kept as a JSON document on the row so
subjects can carry whatever extra fields a school records.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Text, DateTime, String, Boolean, JSON
from reportcard.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Student(Base):
    """
    SQLAlchemy model for the students table.

    `id` never changes after creation. `is_archived` is a caller-managed
    flag; nothing in the grade computation looks at it.
    """
    __tablename__ = "students"

    id = Column(String(64), primary_key=True,
                doc="Student identifier supplied by the school")
    name = Column(Text, nullable=False,
                  doc="Student's full name, matched case-insensitively at login")
    class_name = Column(Text, nullable=True)
    roll_number = Column(Text, nullable=True)
    academic_year = Column(Text, nullable=True)
    principal_comment = Column(Text, nullable=True)
    school_name = Column(Text, nullable=True)
    school_address = Column(Text, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    grades = Column(JSON, nullable=False, default=list,
                    doc="Ordered list of grade entries: {subject, p1..p6, comment, ...}")
    created_at = Column(DateTime, default=_utcnow,
                        doc="Timestamp when the record was created")
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow,
                        doc="Timestamp of the last update")

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}', class='{self.class_name}')>"
