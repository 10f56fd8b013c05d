"""Tests for the report card client, the CLI and the data loader."""

import os

import httpx
import pytest

import load_data
from reportcard import cli
from reportcard.client import DEFAULT_ACADEMIC_YEAR, ReportCardClient, ReportSession, render_report
from reportcard.errors import (
    AuthMismatch, InvalidCredentials, MissingCredentials, StudentNotFound,
    INVALID_CREDENTIALS_MESSAGE,
)
from reportcard.services.grading import build_report


@pytest.fixture
def seeded(client, jane_payload):
    assert client.post("/api/students", json=jane_payload).status_code == 201
    return client


@pytest.fixture
def session(seeded):
    return ReportSession(ReportCardClient(http=seeded))


def test_login_success(session):
    report = session.login("JANE DOE", "S-1001")
    assert session.logged_in
    assert session.current["id"] == "S-1001"
    assert session.report is report
    assert report.composite_letter == "C"


def test_logout_clears_session(session):
    session.login("Jane Doe", "S-1001")
    session.logout()
    assert session.current is None
    assert session.report is None
    assert not session.logged_in


def test_login_wrong_name(session):
    with pytest.raises(InvalidCredentials) as exc_info:
        session.login("Jane Doey", "S-1001")
    assert str(exc_info.value) == INVALID_CREDENTIALS_MESSAGE
    assert isinstance(exc_info.value.cause, AuthMismatch)
    assert session.current is None


def test_login_unknown_id(session):
    with pytest.raises(InvalidCredentials) as exc_info:
        session.login("Jane Doe", "S-0000")
    assert str(exc_info.value) == INVALID_CREDENTIALS_MESSAGE
    assert isinstance(exc_info.value.cause, StudentNotFound)


def test_failed_login_drops_previous_record(session):
    session.login("Jane Doe", "S-1001")
    with pytest.raises(InvalidCredentials):
        session.login("Jane Doe", "S-0000")
    assert session.current is None


def test_login_requires_both_fields(session):
    with pytest.raises(MissingCredentials):
        session.login("", "S-1001")
    with pytest.raises(MissingCredentials):
        session.login("Jane Doe", "   ")


def test_network_error_is_invalid_credentials():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://backend.invalid", transport=httpx.MockTransport(refuse))
    session = ReportSession(ReportCardClient(http=http))
    with pytest.raises(InvalidCredentials) as exc_info:
        session.login("Jane Doe", "S-1001")
    assert isinstance(exc_info.value.cause, httpx.ConnectError)


def test_server_error_is_invalid_credentials():
    http = httpx.Client(base_url="http://backend.invalid",
                        transport=httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "x"})))
    session = ReportSession(ReportCardClient(http=http))
    with pytest.raises(InvalidCredentials):
        session.login("Jane Doe", "S-1001")


def test_render_report(session):
    report = session.login("Jane Doe", "S-1001")
    text = render_report(session.current, report)

    assert "School Name Not Provided" in text
    assert "Name:  Jane Doe" in text
    assert "Class: Grade 10 - A" in text
    assert "Mathematics" in text
    assert "Average" in text
    assert "Overall: 74.8% (C) PASS" in text
    assert "Principal's remarks: Consistent effort all year." in text
    assert "2025-2026" in text


def test_render_report_header_defaults():
    text = render_report({"name": "New Kid", "id": "S-3"}, build_report([]))

    assert "School Name Not Provided" in text
    assert DEFAULT_ACADEMIC_YEAR == "Academic Year 2023-2024"
    assert DEFAULT_ACADEMIC_YEAR in text
    assert "Class: N/A" in text
    assert "Roll:  N/A" in text
    assert "Overall: 0.0% (F) FAIL" in text
    assert "Principal's remarks: No remarks provided." in text


def test_cli_view(seeded, capsys, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda: None)
    code = cli.main(["view", "--name", "jane doe", "--id", "S-1001"],
                    client=ReportCardClient(http=seeded))
    assert code == 0
    out = capsys.readouterr().out
    assert "Jane Doe" in out
    assert "Overall:" in out


def test_cli_view_failure(seeded, capsys, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda: None)
    code = cli.main(["view", "--name", "Nobody", "--id", "S-1001"],
                    client=ReportCardClient(http=seeded))
    assert code == 1
    assert INVALID_CREDENTIALS_MESSAGE in capsys.readouterr().err


def test_load_data_posts_records(client, jane_payload):
    records = [jane_payload, {"id": "S-1002", "name": "Omar Haddad"}, jane_payload]
    results = load_data.post_students(client, records)
    assert [status for _, status, _ in results] == ["CREATED", "CREATED", "EXISTS"]
    assert len(client.get("/api/students").json()) == 2


def test_load_data_sample_file_is_valid():
    path = os.path.join(os.path.dirname(load_data.__file__), "sample_students.json")
    records = load_data.load_students(path)
    assert {r["id"] for r in records} == {"S-1001", "S-1002"}
