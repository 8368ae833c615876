"""Tests for manually recorded deployments"""

import pytest

from tests.conftest import OTHER_USER, make_application, make_provider


@pytest.fixture
def setup(db):
    app = make_application(db)
    provider = make_provider(db, "vercel")
    return app, provider


def test_create_deployment_defaults(client, setup):
    app, provider = setup

    response = client.post("/api/v1/deployments", json={
        "application_id": app["id"],
        "provider_id": provider["id"],
        "environment_id": "env-prod",
        "url": "https://widget.dev",
        "branch": "",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "deployed"
    assert body["branch"] is None
    assert body["deployed_at"] is not None


def test_create_deployment_validation(client, setup):
    app, provider = setup
    base = {"application_id": app["id"], "provider_id": provider["id"], "environment_id": "env-prod"}

    assert client.post("/api/v1/deployments", json={**base, "status": "exploded"}).status_code == 422
    assert client.post("/api/v1/deployments", json={**base, "commit_sha": "a" * 41}).status_code == 422
    assert client.post("/api/v1/deployments", json={**base, "url": "ftp://widget"}).status_code == 422


def test_create_deployment_checks_references(client, db, setup):
    app, provider = setup
    theirs = make_application(db, user_id=OTHER_USER["id"])

    missing_env = client.post("/api/v1/deployments", json={
        "application_id": app["id"], "provider_id": provider["id"], "environment_id": "nope",
    })
    assert missing_env.status_code == 404
    assert missing_env.json()["detail"] == "Environment not found"

    missing_provider = client.post("/api/v1/deployments", json={
        "application_id": app["id"], "provider_id": "nope", "environment_id": "env-prod",
    })
    assert missing_provider.json()["detail"] == "Provider not found"

    foreign_app = client.post("/api/v1/deployments", json={
        "application_id": theirs["id"], "provider_id": provider["id"], "environment_id": "env-prod",
    })
    assert foreign_app.status_code == 404


def test_list_deployments_filters(client, db, setup):
    app, provider = setup
    theirs = make_application(db, user_id=OTHER_USER["id"])
    db.seed("deployments", [
        {"application_id": app["id"], "provider_id": provider["id"], "environment_id": "env-prod",
         "status": "deployed", "deployed_at": "2024-05-01T00:00:00+00:00"},
        {"application_id": app["id"], "provider_id": provider["id"], "environment_id": "env-stg",
         "status": "failed", "deployed_at": "2024-05-02T00:00:00+00:00"},
        {"application_id": theirs["id"], "provider_id": provider["id"], "environment_id": "env-prod",
         "status": "deployed", "deployed_at": "2024-05-03T00:00:00+00:00"},
    ])

    everything = client.get("/api/v1/deployments").json()
    assert [d["status"] for d in everything] == ["failed", "deployed"]
    assert everything[0]["environment"]["slug"] == "staging"

    failed = client.get("/api/v1/deployments", params={"status": "failed"}).json()
    assert len(failed) == 1

    production = client.get("/api/v1/deployments", params={"environment_id": "env-prod"}).json()
    assert [d["environment_id"] for d in production] == ["env-prod"]

    paged = client.get("/api/v1/deployments", params={"limit": 1, "offset": 1}).json()
    assert [d["status"] for d in paged] == ["deployed"]

    assert client.get("/api/v1/deployments", params={"application_id": theirs["id"]}).status_code == 404


def test_update_and_delete_deployment(client, db, setup):
    app, provider = setup
    [deployment] = db.seed("deployments", [
        {"application_id": app["id"], "provider_id": provider["id"], "environment_id": "env-prod", "status": "building"},
    ])

    updated = client.put(f"/api/v1/deployments/{deployment['id']}", json={"status": "rolled_back"})
    assert updated.json()["status"] == "rolled_back"

    assert client.delete(f"/api/v1/deployments/{deployment['id']}").status_code == 204
    assert client.get(f"/api/v1/deployments/{deployment['id']}").status_code == 404


def test_foreign_deployment_is_not_found(client, db, setup):
    _, provider = setup
    theirs = make_application(db, user_id=OTHER_USER["id"])
    [deployment] = db.seed("deployments", [
        {"application_id": theirs["id"], "provider_id": provider["id"], "environment_id": "env-prod", "status": "deployed"},
    ])

    assert client.get(f"/api/v1/deployments/{deployment['id']}").status_code == 404
    assert client.delete(f"/api/v1/deployments/{deployment['id']}").status_code == 404
