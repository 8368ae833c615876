"""Tests for the GitHub views and the public-repo import"""

import pytest

from cloud_tracker.clients.github import GitHubRepo
from cloud_tracker.modules.github.service import infer_tech_stack
from tests.conftest import make_application, save_settings


def repo(name, **fields):
    values = {
        "id": abs(hash(name)) % 100000,
        "name": name,
        "full_name": f"acme/{name}",
        "html_url": f"https://github.com/acme/{name}",
        "private": False,
    }
    values.update(fields)
    return values


@pytest.mark.parametrize("fields, expected", [
    ({"language": "TypeScript", "description": "Next.js marketing site"}, ["TypeScript", "Next.js"]),
    ({"language": "JavaScript", "topics": ["react", "supabase"]}, ["JavaScript", "React", "Supabase"]),
    ({"language": "Swift"}, ["Swift", "macOS"]),
    ({"name": "edge-worker"}, ["Cloudflare"]),
])
def test_infer_tech_stack(fields, expected):
    assert infer_tech_stack(GitHubRepo(**repo(fields.pop("name", "site"), **fields))) == expected


def test_repos_empty_without_token(client, provider_api):
    assert client.get("/api/v1/github/repos").json() == []
    assert provider_api.requests == []


def test_repos_with_token(client, db, provider_api):
    save_settings(db, github_token="gh")
    provider_api.add("/user/repos", [repo("widget", language="Python")])

    [listed] = client.get("/api/v1/github/repos").json()
    assert listed["full_name"] == "acme/widget"


def test_starred_requires_token_and_username(client, db):
    save_settings(db, github_token="gh")
    response = client.get("/api/v1/github/starred")
    assert response.status_code == 400
    assert response.json()["detail"] == "GitHub token not configured"


def test_starred(client, db, provider_api):
    save_settings(db, github_token="gh", github_username="acme")
    provider_api.add("/users/acme/starred", [repo("fastapi", stargazers_count=70000)])

    [starred] = client.get("/api/v1/github/starred").json()["repos"]
    assert starred["full_name"] == "acme/fastapi"
    assert starred["stargazers_count"] == 70000


def test_tab_data_needs_token(client):
    response = client.get("/api/v1/github/repos/acme/widget/tab")
    assert response.status_code == 400
    assert response.json()["detail"] == "No GitHub token configured"


def test_import_needs_username(client):
    response = client.post("/api/v1/github/import")
    assert response.status_code == 400
    assert response.json()["detail"] == "GitHub username required"


def test_import_rejects_invalid_username(client):
    assert client.post("/api/v1/github/import", json={"username": "-bad-"}).status_code == 422


def test_import_skips_tracked_and_private_repos(client, db, provider_api):
    make_application(db, repository_url="https://github.com/acme/widget")
    provider_api.add("/users/acme/repos", [
        repo("widget"),
        repo("secret", private=True),
        repo("site", language="TypeScript", description="Astro blog"),
    ])

    result = client.post("/api/v1/github/import", json={"username": "acme"}).json()

    assert result == {
        "imported": ["site"],
        "skipped": ["widget (already exists)", "secret (private)"],
        "errors": [],
    }
    site = next(a for a in db.rows("applications") if a["name"] == "site")
    assert site["tech_stack"] == ["TypeScript", "Astro"]
    assert site["status"] == "active"

    tags = {t["name"]: t for t in db.rows("tags")}
    assert tags["TypeScript"]["color"] == "#3178c6"
    assert tags["Astro"]["color"] == "#ff5d01"
    assert len(db.rows("application_tags")) == 2


def test_import_reuses_existing_tags(client, db, provider_api):
    [existing] = db.seed("tags", [{"user_id": "user-1", "name": "Python", "color": "#123456"}])
    save_settings(db, github_username="acme")
    provider_api.add("/users/acme/repos", [repo("one", language="Python"), repo("two", language="Python")])

    result = client.post("/api/v1/github/import").json()

    assert result["imported"] == ["one", "two"]
    assert len(db.rows("tags")) == 1
    assert {link["tag_id"] for link in db.rows("application_tags")} == {existing["id"]}


def test_import_reports_github_failure(client, provider_api):
    provider_api.add("/users/acme/repos", {"message": "rate limited"}, status=403)

    response = client.post("/api/v1/github/import", json={"username": "acme"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to fetch GitHub repos"


def test_import_collects_per_repo_errors(client, db, provider_api):
    provider_api.add("/users/acme/repos", [repo("one")])
    db.fail_on("applications", "insert")

    result = client.post("/api/v1/github/import", json={"username": "acme"}).json()

    assert result["imported"] == []
    assert result["errors"][0].startswith("one:")
