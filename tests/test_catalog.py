"""Tests for providers, tags and environments"""

from tests.conftest import OTHER_USER, make_application, make_provider


def test_environments_are_ordered(client):
    response = client.get("/api/v1/environments")

    assert response.status_code == 200
    assert [e["slug"] for e in response.json()] == ["development", "staging", "production"]
    assert client.get("/api/v1/environments/env-prod").json()["name"] == "Production"
    assert client.get("/api/v1/environments/missing").status_code == 404


def test_create_provider_validates_slug(client):
    assert client.post("/api/v1/providers", json={"name": "Vercel", "slug": "Vercel!"}).status_code == 422

    response = client.post("/api/v1/providers", json={"name": "Vercel", "slug": "vercel", "base_url": ""})

    assert response.status_code == 201
    assert response.json()["base_url"] is None
    assert response.json()["is_active"] is True


def test_duplicate_provider_slug(client):
    client.post("/api/v1/providers", json={"name": "Vercel", "slug": "vercel"})

    response = client.post("/api/v1/providers", json={"name": "Vercel again", "slug": "vercel"})

    assert response.status_code == 400
    assert response.json()["detail"] == "A provider with this slug already exists"


def test_providers_with_counts(client, db):
    vercel = make_provider(db, "vercel")
    make_provider(db, "netlify")
    make_provider(db, "render", user_id=OTHER_USER["id"])
    widget = make_application(db)
    gadget = make_application(db, name="gadget")
    db.seed("deployments", [
        {"application_id": widget["id"], "provider_id": vercel["id"], "environment_id": "env-prod", "status": "deployed"},
        {"application_id": widget["id"], "provider_id": vercel["id"], "environment_id": "env-stg", "status": "deployed"},
        {"application_id": gadget["id"], "provider_id": vercel["id"], "environment_id": "env-prod", "status": "failed"},
    ])

    response = client.get("/api/v1/providers/with-counts")

    counts = {p["slug"]: (p["deployment_count"], p["app_count"]) for p in response.json()}
    assert counts == {"vercel": (3, 2), "netlify": (0, 0)}


def test_delete_provider_in_use(client, db):
    vercel = make_provider(db, "vercel")
    app = make_application(db)
    db.seed("deployments", [
        {"application_id": app["id"], "provider_id": vercel["id"], "environment_id": "env-prod", "status": "deployed"},
    ])

    response = client.delete(f"/api/v1/providers/{vercel['id']}")

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete provider with existing deployments"


def test_update_and_delete_provider(client, db):
    provider = make_provider(db, "netlify")

    updated = client.put(f"/api/v1/providers/{provider['id']}", json={"is_active": False})
    assert updated.json()["is_active"] is False

    assert client.delete(f"/api/v1/providers/{provider['id']}").status_code == 204
    assert client.get(f"/api/v1/providers/{provider['id']}").status_code == 404


def test_other_users_provider_is_not_found(client, db):
    provider = make_provider(db, "vercel", user_id=OTHER_USER["id"])
    assert client.get(f"/api/v1/providers/{provider['id']}").status_code == 404


def test_tag_crud(client):
    created = client.post("/api/v1/tags", json={"name": "Astro"})
    assert created.status_code == 201
    assert created.json()["color"] == "#3b82f6"
    tag_id = created.json()["id"]

    assert client.post("/api/v1/tags", json={"name": "Bad", "color": "red"}).status_code == 422

    updated = client.put(f"/api/v1/tags/{tag_id}", json={"color": "#ff5d01"})
    assert updated.json()["color"] == "#ff5d01"

    assert [t["name"] for t in client.get("/api/v1/tags").json()] == ["Astro"]
    assert client.delete(f"/api/v1/tags/{tag_id}").status_code == 204
    assert client.get("/api/v1/tags").json() == []


def test_duplicate_tag_name(client):
    client.post("/api/v1/tags", json={"name": "Astro"})

    response = client.post("/api/v1/tags", json={"name": "Astro"})

    assert response.status_code == 400
    assert response.json()["detail"] == "A tag with this name already exists"


def test_tag_name_length(client):
    assert client.post("/api/v1/tags", json={"name": "x" * 31}).status_code == 422
    assert client.post("/api/v1/tags", json={"name": ""}).status_code == 422
