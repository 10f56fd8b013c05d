"""
Pytest configuration and fixtures.

The app runs against a shared in-memory SQLite database; tables are
created before and dropped after every test.
"""
import os

# Must be set before reportcard.database is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from reportcard.database import SessionLocal, create_tables, drop_tables
from reportcard.main import app
from reportcard.schemas import StudentCreate
from reportcard.services.student_store import StudentStore


@pytest.fixture(autouse=True)
def tables():
    create_tables()
    yield
    app.dependency_overrides.clear()
    drop_tables()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return StudentStore(db)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def jane_payload():
    return {
        "id": "S-1001",
        "name": "Jane Doe",
        "className": "Grade 10 - A",
        "rollNumber": "12",
        "academicYear": "2025-2026",
        "principalComment": "Consistent effort all year.",
        "grades": [
            {"subject": "Mathematics", "p1": 90, "p2": 80, "p3": 70, "p4": 88, "p5": 92, "p6": 85,
             "comment": "Strong second half"},
            {"subject": "English", "p1": "78", "p2": "", "p3": 82, "p5": 75, "p6": 80},
            {"subject": "Science", "p1": 65, "p2": 58, "p3": "absent", "teacher": "Mr. Obi"},
        ],
    }


@pytest.fixture
def jane(store, jane_payload):
    return store.create(StudentCreate(**jane_payload))
