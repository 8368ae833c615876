"""Tests for provider state -> deployment status / environment mapping"""

import pytest

from cloud_tracker.clients.cloudflare import CloudflareStage
from cloud_tracker.modules.sync.mappers import (
    DEPLOYMENT_STATUSES,
    classify_environment,
    map_cloudflare_stage,
    map_github_status,
    map_vercel_state,
)


@pytest.mark.parametrize("state,expected", [
    ("READY", "deployed"),
    ("ERROR", "failed"),
    ("BUILDING", "building"),
    ("INITIALIZING", "building"),
    ("QUEUED", "pending"),
    ("CANCELED", "rolled_back"),
    ("SOMETHING_NEW", "pending"),
    (None, "pending"),
])
def test_vercel_states(state, expected):
    assert map_vercel_state(state) == expected


def test_vercel_state_is_case_sensitive():
    """Vercel sends upper-case states; anything else is unknown"""
    assert map_vercel_state("ready") == "pending"


@pytest.mark.parametrize("name,status,expected", [
    ("deploy", "success", "deployed"),
    ("build", "success", "pending"),
    ("deploy", "failure", "failed"),
    ("build", "failure", "failed"),
    ("deploy", "canceled", "rolled_back"),
    ("build", "active", "building"),
    ("queued", "idle", "pending"),
])
def test_cloudflare_stages(name, status, expected):
    assert map_cloudflare_stage(CloudflareStage(name=name, status=status)) == expected


def test_cloudflare_missing_stage_is_pending():
    assert map_cloudflare_stage(None) == "pending"
    assert map_cloudflare_stage(CloudflareStage(name="deploy")) == "pending"


@pytest.mark.parametrize("state,expected", [
    ("success", "deployed"),
    ("error", "failed"),
    ("failure", "failed"),
    ("pending", "pending"),
    ("queued", "pending"),
    ("in_progress", "building"),
    ("inactive", "rolled_back"),
    ("unknown", "pending"),
    (None, "pending"),
])
def test_github_states(state, expected):
    assert map_github_status(state) == expected


def test_mappers_only_produce_known_statuses():
    inputs = ["READY", "ERROR", "x", None, "success", "inactive", ""]
    for value in inputs:
        assert map_vercel_state(value) in DEPLOYMENT_STATUSES
        assert map_github_status(value) in DEPLOYMENT_STATUSES


@pytest.mark.parametrize("name,expected", [
    ("Production", "production"),
    ("prod-eu", "production"),
    ("Staging", "staging"),
    ("Preview", "staging"),
    ("dev", "development"),
    ("", "development"),
    (None, "development"),
])
def test_classify_environment(name, expected):
    assert classify_environment(name) == expected
