"""Tests for the dashboard counters"""

from tests.conftest import OTHER_USER, make_application, make_provider


def test_dashboard_counts_are_scoped_to_user(client, db):
    mine = make_application(db, status="active")
    make_application(db, name="old", status="archived")
    make_application(db, name="odd", status="unknown")
    theirs = make_application(db, user_id=OTHER_USER["id"], name="theirs")

    provider = make_provider(db, "vercel")
    make_provider(db, "cloudflare", is_active=False)
    make_provider(db, "github", user_id=OTHER_USER["id"])
    db.seed("tags", [{"user_id": "user-1", "name": "Python"}, {"user_id": OTHER_USER["id"], "name": "Go"}])
    db.seed("deployments", [
        {"application_id": mine["id"], "provider_id": provider["id"], "environment_id": "env-prod"},
        {"application_id": mine["id"], "provider_id": provider["id"], "environment_id": "env-stg"},
        {"application_id": mine["id"], "provider_id": provider["id"], "environment_id": "env-prod"},
        {"application_id": theirs["id"], "provider_id": provider["id"], "environment_id": "env-prod"},
    ])

    stats = client.get("/api/v1/stats/dashboard").json()

    assert stats["total_applications"] == 3
    assert stats["total_deployments"] == 3
    assert stats["active_providers"] == 1
    assert stats["total_tags"] == 1
    assert stats["status_counts"] == {"active": 1, "inactive": 0, "maintenance": 0, "archived": 1}
    assert stats["environment_counts"] == {"development": 0, "staging": 1, "production": 2}


def test_dashboard_without_applications(client):
    stats = client.get("/api/v1/stats/dashboard").json()
    assert stats["total_applications"] == 0
    assert stats["total_deployments"] == 0


def test_recent_deployments_newest_first(client, db):
    app = make_application(db)
    provider = make_provider(db, "vercel")
    db.seed("deployments", [
        {"application_id": app["id"], "provider_id": provider["id"], "environment_id": "env-prod",
         "status": "deployed", "deployed_at": "2024-05-01T10:00:00+00:00"},
        {"application_id": app["id"], "provider_id": provider["id"], "environment_id": "env-stg",
         "status": "deployed", "deployed_at": "2024-05-03T10:00:00+00:00"},
    ])

    recent = client.get("/api/v1/stats/recent-deployments").json()

    assert [d["environment"]["slug"] for d in recent] == ["staging", "production"]
    assert recent[0]["application"]["name"] == "widget"


def test_recent_applications_limit(client, db):
    make_application(db, name="a", updated_at="2024-05-01T00:00:00+00:00")
    make_application(db, name="b", updated_at="2024-05-03T00:00:00+00:00")
    make_application(db, name="c", updated_at="2024-05-02T00:00:00+00:00")

    recent = client.get("/api/v1/stats/recent-applications", params={"limit": 2}).json()

    assert [a["name"] for a in recent] == ["b", "c"]
