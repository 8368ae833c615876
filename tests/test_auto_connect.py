"""Tests for linking applications to provider projects by repository name"""

from cloud_tracker.clients.cloudflare import CloudflarePagesProject
from cloud_tracker.clients.vercel import VercelProject
from cloud_tracker.modules.auto_connect.service import (
    AutoConnectService,
    build_cloudflare_lookup,
    build_vercel_lookup,
    extract_owner_repo,
    extract_repo_name,
)
from tests.conftest import CLOUDFLARE_ACCOUNT_ID, make_application, save_settings

CF_BASE = f"/client/v4/accounts/{CLOUDFLARE_ACCOUNT_ID}"


def test_extract_repo_name():
    assert extract_repo_name("https://github.com/acme/widget") == "widget"
    assert extract_repo_name("https://github.com/acme/widget/") == "widget"
    assert extract_repo_name("https://github.com/acme") is None
    assert extract_repo_name("not a url") is None
    assert extract_repo_name(None) is None


def test_extract_owner_repo():
    assert extract_owner_repo("https://github.com/acme/widget/tree/main") == "acme/widget"
    assert extract_owner_repo("https://gitlab.com/acme") is None


def test_vercel_lookup_prefers_custom_alias():
    projects = [
        VercelProject(id="prj_1", name="widget-site", link={"repo": "acme/widget"},
                      targets={"production": {"alias": ["widget.vercel.app", "widget.dev"]}}),
        VercelProject(id="prj_2", name="gadget", targets={"production": {"alias": ["gadget.vercel.app"]}}),
        VercelProject(id="prj_3", name="bare"),
    ]

    lookup = build_vercel_lookup(projects)

    assert lookup["widget"].value == "prj_1"
    assert lookup["widget"].live_url == "https://widget.dev"
    assert lookup["widget-site"].value == "prj_1"
    assert lookup["gadget"].live_url == "https://gadget.vercel.app"
    assert lookup["bare"].live_url == ""


def test_repo_key_wins_over_project_name():
    """A project named after another project's repo does not replace the repo match"""
    projects = [
        VercelProject(id="prj_repo", name="site", link={"repo": "acme/widget"}),
        VercelProject(id="prj_named", name="widget"),
    ]
    assert build_vercel_lookup(projects)["widget"].value == "prj_repo"


def test_cloudflare_lookup_live_url():
    projects = [
        CloudflarePagesProject(name="docs", subdomain="docs.pages.dev", domains=["docs.acme.dev"],
                               source={"config": {"repo_name": "acme-docs"}}),
        CloudflarePagesProject(name="blog", subdomain="blog.pages.dev"),
    ]

    lookup = build_cloudflare_lookup(projects)

    assert lookup["acme-docs"].value == "docs"
    assert lookup["acme-docs"].live_url == "https://docs.acme.dev"
    assert lookup["docs"].value == "docs"
    assert lookup["blog"].live_url == "https://blog.pages.dev"


def connected_settings(db):
    save_settings(
        db,
        vercel_token="vercel-token",
        cloudflare_token="cf-token",
        cloudflare_account_id=CLOUDFLARE_ACCOUNT_ID,
    )


def serve_projects(provider_api):
    provider_api.add("/v9/projects", {"projects": [{
        "id": "prj_w",
        "name": "widget-web",
        "link": {"type": "github", "repo": "acme/widget"},
        "targets": {"production": {"alias": ["widget.vercel.app", "widget.dev"]}},
    }]})
    provider_api.add(f"{CF_BASE}/pages/projects", {"success": True, "result": [
        {"name": "widget", "subdomain": "widget.pages.dev"},
    ]})
    provider_api.add(f"{CF_BASE}/workers/scripts", {"success": True, "result": [{"id": "widget"}]})


def test_widget_is_linked_everywhere(db, clients, provider_api, user):
    app = make_application(db)
    connected_settings(db)
    serve_projects(provider_api)

    result = AutoConnectService(db, clients).auto_connect_providers(user)

    assert result.success
    assert result.data.vercel == ["widget"]
    assert result.data.cloudflare == ["widget"]
    assert result.data.workers == ["widget"]
    assert result.data.github == ["widget"]

    [row] = [a for a in db.rows("applications") if a["id"] == app["id"]]
    assert row["vercel_project_id"] == "prj_w"
    assert row["cloudflare_project_name"] == "widget"
    assert row["cloudflare_worker_name"] == "widget"
    assert row["github_repo_name"] == "acme/widget"
    # Vercel's custom alias is staged first, Cloudflare's does not replace it
    assert row["live_url"] == "https://widget.dev"


def test_existing_links_are_never_overwritten(db, clients, provider_api, user):
    make_application(
        db,
        vercel_project_id="prj_manual",
        cloudflare_project_name="manual",
        cloudflare_worker_name="manual",
        github_repo_name="acme/widget",
        live_url="https://mine.example",
    )
    connected_settings(db)
    serve_projects(provider_api)

    result = AutoConnectService(db, clients).auto_connect_providers(user)

    assert result.data.vercel == []
    assert result.data.cloudflare == []
    assert result.data.already_connected == 1
    [row] = db.rows("applications")
    assert row["vercel_project_id"] == "prj_manual"
    assert row["live_url"] == "https://mine.example"
    assert db.writes("applications") == []


def test_existing_live_url_is_kept(db, clients, provider_api, user):
    make_application(db, live_url="https://mine.example")
    connected_settings(db)
    serve_projects(provider_api)

    AutoConnectService(db, clients).auto_connect_providers(user)

    [row] = db.rows("applications")
    assert row["vercel_project_id"] == "prj_w"
    assert row["live_url"] == "https://mine.example"


def test_apps_without_repo_url_are_counted(db, clients, provider_api, user):
    make_application(db, name="no-repo", repository_url=None)
    make_application(db, name="short", repository_url="https://github.com/acme")
    connected_settings(db)
    serve_projects(provider_api)

    result = AutoConnectService(db, clients).auto_connect_providers(user)

    assert result.data.no_repo_url == 2


def test_without_credentials_only_github_links(db, clients, provider_api, user):
    make_application(db)

    result = AutoConnectService(db, clients).auto_connect_providers(user)

    assert result.data.github == ["widget"]
    assert result.data.vercel == []
    assert provider_api.requests == []


def test_failed_lookup_degrades_to_no_matches(db, clients, provider_api, user):
    make_application(db)
    connected_settings(db)
    serve_projects(provider_api)
    provider_api.add("/v9/projects", {"error": "boom"}, status=500)

    result = AutoConnectService(db, clients).auto_connect_providers(user)

    assert result.success
    assert result.data.vercel == []
    assert result.data.cloudflare == ["widget"]


def test_one_failed_update_does_not_affect_others(db, clients, provider_api, user):
    make_application(db, name="widget")
    make_application(db, name="gadget", repository_url="https://github.com/acme/gadget")
    db.fail_on("applications", "update")

    result = AutoConnectService(db, clients).auto_connect_providers(user)

    assert result.success
    assert sorted(result.data.github) == ["gadget", "widget"]


def test_requires_user_and_applications(db, clients, user):
    service = AutoConnectService(db, clients)
    assert service.auto_connect_providers(None).error == "Not authenticated"
    assert service.auto_connect_providers(user).error == "No applications found"


def test_auto_connect_route(client, db, provider_api):
    make_application(db)

    response = client.post("/api/v1/auto-connect")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["github"] == ["widget"]
