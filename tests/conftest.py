"""
Pytest configuration shared across the test suite

Provides an in-memory Supabase fake, a mock provider API behind
httpx.MockTransport, and a TestClient with the auth and database
dependencies overridden.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from cloud_tracker.clients.factory import ProviderClientFactory, get_client_factory
from cloud_tracker.core.dependencies import get_current_user_id, get_optional_user
from cloud_tracker.database.supabase_client import get_service_supabase, get_supabase
from cloud_tracker.main import app
from tests.fakes import FakeProviderAPI, FakeSupabase

USER = {"id": "user-1", "email": "jb@example.com"}
OTHER_USER = {"id": "user-2", "email": "other@example.com"}

CLOUDFLARE_ACCOUNT_ID = "0123456789abcdef0123456789abcdef"

APPLICATION_CHILDREN = [
    ("deployments", "application_id"),
    ("application_tags", "application_id"),
    ("app_todos", "application_id"),
    ("app_notes", "application_id"),
    ("claude_sessions", "application_id"),
    ("maintenance_runs", "application_id"),
]


@pytest.fixture
def db():
    """Fake database with the reference environments seeded"""
    fake = FakeSupabase(
        unique={
            "tags": [("user_id", "name")],
            "cloud_providers": [("user_id", "slug")],
            "user_settings": [("user_id",)],
            "deployments": [("application_id", "external_id")],
        },
        restrict={"cloud_providers": [("deployments", "provider_id")]},
        cascade={"applications": APPLICATION_CHILDREN},
    )
    fake.seed("environments", [
        {"id": "env-dev", "name": "Development", "slug": "development", "sort_order": 1},
        {"id": "env-stg", "name": "Staging", "slug": "staging", "sort_order": 2},
        {"id": "env-prod", "name": "Production", "slug": "production", "sort_order": 3},
    ])
    return fake


@pytest.fixture
def provider_api():
    return FakeProviderAPI()


@pytest.fixture
def clients(provider_api):
    return ProviderClientFactory(transport=httpx.MockTransport(provider_api))


@pytest.fixture
def user():
    return dict(USER)


@pytest.fixture
def client(db, clients):
    """TestClient signed in as USER"""
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_client_factory] = lambda: clients
    app.dependency_overrides[get_current_user_id] = lambda: dict(USER)
    app.dependency_overrides[get_optional_user] = lambda: dict(USER)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db, clients):
    """TestClient without credentials; real auth dependencies stay in place"""
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_client_factory] = lambda: clients
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_application(db, user_id=USER["id"], **fields):
    values = {
        "user_id": user_id,
        "name": "widget",
        "description": None,
        "repository_url": "https://github.com/acme/widget",
        "live_url": None,
        "status": "active",
        "tech_stack": [],
        "vercel_project_id": None,
        "cloudflare_project_name": None,
        "cloudflare_worker_name": None,
        "github_repo_name": None,
    }
    values.update(fields)
    return db.seed("applications", [values])[0]


def make_provider(db, slug, user_id=USER["id"], **fields):
    values = {"user_id": user_id, "name": slug.title(), "slug": slug, "is_active": True}
    values.update(fields)
    return db.seed("cloud_providers", [values])[0]


def save_settings(db, user_id=USER["id"], **fields):
    return db.seed("user_settings", [{"user_id": user_id, **fields}])[0]
