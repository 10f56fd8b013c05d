"""Unit tests for the student store."""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from reportcard.errors import DuplicateStudent, StoreUnavailable, StudentNotFound
from reportcard.schemas import StudentCreate, StudentUpdate, serialize_student
from reportcard.services.student_store import StudentStore


def test_create_then_get_round_trip(store, jane, jane_payload):
    fetched = serialize_student(store.get("S-1001"))

    for key in ("id", "name", "className", "rollNumber", "academicYear", "principalComment"):
        assert fetched[key] == jane_payload[key]
    assert fetched["isArchived"] is False
    assert fetched["createdAt"] is not None

    assert len(fetched["grades"]) == len(jane_payload["grades"])
    for submitted, stored in zip(jane_payload["grades"], fetched["grades"]):
        for key, value in submitted.items():
            assert stored[key] == value


def test_extra_grade_fields_are_kept(store, jane):
    science = store.get("S-1001").grades[2]
    assert science["teacher"] == "Mr. Obi"
    assert science["p3"] == "absent"


def test_duplicate_id_rejected_and_store_unchanged(store, jane):
    with pytest.raises(DuplicateStudent):
        store.create(StudentCreate(id="S-1001", name="Someone Else"))

    students = store.list()
    assert len(students) == 1
    assert students[0].name == "Jane Doe"


def test_get_unknown_id(store):
    with pytest.raises(StudentNotFound) as exc_info:
        store.get("nope")
    assert exc_info.value.student_id == "nope"


def test_list_returns_all(store, jane):
    store.create(StudentCreate(id="S-1002", name="Omar Haddad"))
    assert [s.id for s in store.list()] == ["S-1001", "S-1002"]


def test_update_applies_only_present_fields(store, jane):
    updated = store.update("S-1001", StudentUpdate(className="Grade 11 - A", isArchived=True))
    assert updated.class_name == "Grade 11 - A"
    assert updated.is_archived is True
    assert updated.name == "Jane Doe"
    assert len(updated.grades) == 3


def test_update_replaces_grades(store, jane):
    updated = store.update("S-1001", StudentUpdate(grades=[{"subject": "Art", "p1": 95}]))
    assert updated.grades == [
        {"subject": "Art", "p1": 95, "p2": None, "p3": None, "p4": None,
         "p5": None, "p6": None, "comment": None}
    ]


def test_update_never_changes_id(store, jane):
    payload = StudentUpdate.model_validate({"id": "S-9999", "name": "Jane Q. Doe"})
    updated = store.update("S-1001", payload)
    assert updated.id == "S-1001"
    assert updated.name == "Jane Q. Doe"
    with pytest.raises(StudentNotFound):
        store.get("S-9999")


def test_update_unknown_id(store):
    with pytest.raises(StudentNotFound):
        store.update("nope", StudentUpdate(name="X"))


def test_update_rejects_null_name():
    with pytest.raises(ValidationError):
        StudentUpdate.model_validate({"name": None})
    with pytest.raises(ValidationError):
        StudentUpdate.model_validate({"name": "   "})


def test_delete(store, jane):
    store.delete("S-1001")
    with pytest.raises(StudentNotFound):
        store.get("S-1001")
    with pytest.raises(StudentNotFound):
        store.delete("S-1001")


def test_storage_failure_becomes_store_unavailable():
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    store = StudentStore(session)

    with pytest.raises(StoreUnavailable):
        store.list()
    with pytest.raises(StoreUnavailable):
        store.get("S-1001")
    with pytest.raises(StoreUnavailable):
        store.create(StudentCreate(id="S-1", name="A"))
    assert session.rollback.called
