"""
Tests for coding-session tracking.

Dashboard endpoints use the signed-in user; the /external endpoints are
called by the session hook with the static API token.
"""

from datetime import datetime, timezone

import pytest

from cloud_tracker.config import settings
from cloud_tracker.modules.sessions.service import duration_minutes, tokens_total
from tests.conftest import OTHER_USER, make_application

API_TOKEN = "hook-secret"


@pytest.fixture
def api_token(monkeypatch):
    monkeypatch.setattr(settings, "claude_code_api_token", API_TOKEN)
    return {"Authorization": f"Bearer {API_TOKEN}"}


def test_duration_rounds_half_minutes_up():
    start = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert duration_minutes(start, datetime(2024, 5, 1, 10, 42, 30, tzinfo=timezone.utc)) == 43
    assert duration_minutes(start, datetime(2024, 5, 1, 10, 42, 29, tzinfo=timezone.utc)) == 42
    assert duration_minutes(start, None) is None


def test_tokens_total_needs_both_sides():
    assert tokens_total(1000, 250) == 1250
    assert tokens_total(1000, None) is None
    assert tokens_total(0, 0) == 0


# Dashboard

def test_create_session_computes_derived_fields(client, db):
    app = make_application(db)

    response = client.post("/api/v1/sessions", json={
        "application_id": app["id"],
        "started_at": "2024-05-01T10:00:00Z",
        "ended_at": "2024-05-01T11:30:00Z",
        "tokens_input": 500,
        "tokens_output": 100,
        "starting_branch": "",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["duration_minutes"] == 90
    assert body["tokens_total"] == 600
    assert body["starting_branch"] is None
    assert body["session_source"] == "claude-code"


def test_explicit_totals_are_kept(client, db):
    app = make_application(db)

    body = client.post("/api/v1/sessions", json={
        "application_id": app["id"],
        "started_at": "2024-05-01T10:00:00Z",
        "ended_at": "2024-05-01T11:30:00Z",
        "duration_minutes": 5,
        "tokens_input": 500,
        "tokens_output": 100,
        "tokens_total": 42,
    }).json()

    assert body["duration_minutes"] == 5
    assert body["tokens_total"] == 42


def test_session_for_foreign_application(client, db):
    theirs = make_application(db, user_id=OTHER_USER["id"])
    response = client.post("/api/v1/sessions", json={"application_id": theirs["id"]})
    assert response.status_code == 404


def test_session_stats(client, db):
    app = make_application(db)
    db.seed("claude_sessions", [
        {"application_id": app["id"], "started_at": "2024-05-01T10:00:00Z", "duration_minutes": 30,
         "tokens_total": 1000, "commits_count": 2},
        {"application_id": app["id"], "started_at": "2024-05-02T10:00:00Z", "duration_minutes": None,
         "tokens_total": None, "commits_count": 1},
    ])

    stats = client.get(f"/api/v1/applications/{app['id']}/sessions/stats").json()

    assert stats == {"total_sessions": 2, "total_duration_minutes": 30, "total_tokens": 1000, "total_commits": 3}


def test_recent_sessions_only_include_own_applications(client, db):
    app = make_application(db)
    theirs = make_application(db, user_id=OTHER_USER["id"], name="theirs")
    db.seed("claude_sessions", [
        {"application_id": app["id"], "started_at": "2024-05-01T10:00:00Z"},
        {"application_id": app["id"], "started_at": "2024-05-03T10:00:00Z"},
        {"application_id": theirs["id"], "started_at": "2024-05-02T10:00:00Z"},
    ])

    recent = client.get("/api/v1/sessions/recent").json()

    assert [s["started_at"][:10] for s in recent] == ["2024-05-03", "2024-05-01"]
    assert recent[0]["application"] == {"id": app["id"], "name": "widget"}


def test_update_session_recomputes_duration(client, db):
    app = make_application(db)
    [session] = db.seed("claude_sessions", [{"application_id": app["id"], "started_at": "2024-05-01T10:00:00+00:00"}])

    response = client.patch(f"/api/v1/sessions/{session['id']}", json={"ended_at": "2024-05-01T10:15:00Z"})

    assert response.status_code == 200
    assert response.json()["duration_minutes"] == 15


def test_get_and_delete_session(client, db):
    app = make_application(db)
    [session] = db.seed("claude_sessions", [{"application_id": app["id"], "started_at": "2024-05-01T10:00:00Z"}])

    assert client.get(f"/api/v1/sessions/{session['id']}").json()["application"]["name"] == "widget"
    assert client.delete(f"/api/v1/sessions/{session['id']}").status_code == 204
    assert client.get(f"/api/v1/sessions/{session['id']}").status_code == 404


# External API

def test_external_requires_token(client, api_token):
    assert client.get("/api/v1/external/applications").status_code == 401
    bad = client.get("/api/v1/external/applications", headers={"Authorization": "Bearer wrong"})
    assert bad.status_code == 401


def test_external_unconfigured_token_rejects_everything(client, monkeypatch):
    monkeypatch.setattr(settings, "claude_code_api_token", None)
    response = client.get("/api/v1/external/applications", headers={"Authorization": "Bearer anything"})
    assert response.status_code == 401


def test_external_lists_all_applications_by_name(client, db, api_token):
    make_application(db, name="zeta")
    make_application(db, user_id=OTHER_USER["id"], name="alpha")

    response = client.get("/api/v1/external/applications", headers=api_token)

    assert [a["name"] for a in response.json()["applications"]] == ["alpha", "zeta"]


def test_external_session_round(client, db, api_token):
    app = make_application(db)

    created = client.post("/api/v1/external/sessions", headers=api_token, json={
        "application_id": app["id"],
        "started_at": "2024-05-01T10:00:00Z",
        "ended_at": "2024-05-01T10:42:30Z",
        "tokens_input": 1000,
        "tokens_output": 250,
        "commits_count": 3,
        "accomplishments": ["Added sync"],
    })

    assert created.status_code == 201
    assert created.json()["success"] is True
    session_id = created.json()["session_id"]

    [row] = db.rows("claude_sessions")
    assert row["duration_minutes"] == 43
    assert row["tokens_total"] == 1250

    patched = client.patch("/api/v1/external/sessions", headers=api_token, json={
        "id": session_id,
        "ended_at": "2024-05-01T11:00:00Z",
        "summary": "Finished",
    })
    assert patched.json() == {"success": True}
    assert db.rows("claude_sessions")[0]["duration_minutes"] == 60
    assert db.rows("claude_sessions")[0]["summary"] == "Finished"

    listed = client.get("/api/v1/external/sessions", headers=api_token, params={"application_id": app["id"]})
    assert [s["id"] for s in listed.json()["sessions"]] == [session_id]


def test_external_session_errors(client, db, api_token):
    assert client.get("/api/v1/external/sessions", headers=api_token).status_code == 400

    missing_app = client.post("/api/v1/external/sessions", headers=api_token, json={
        "application_id": "nope",
        "started_at": "2024-05-01T10:00:00Z",
    })
    assert missing_app.status_code == 404
    assert missing_app.json()["detail"] == "Application not found"

    no_start = client.post("/api/v1/external/sessions", headers=api_token, json={"application_id": "nope"})
    assert no_start.status_code == 422

    missing_session = client.patch("/api/v1/external/sessions", headers=api_token, json={"id": "nope"})
    assert missing_session.status_code == 404
    assert missing_session.json()["detail"] == "Session not found"
