"""
Provider state -> unified DeploymentStatus / environment slug.

All mappers are total: unknown or missing input maps to "pending" (or
"development" for environments) and nothing here raises.
"""

from typing import Optional

from cloud_tracker.clients.cloudflare import CloudflareStage

DEPLOYED = "deployed"
PENDING = "pending"
BUILDING = "building"
FAILED = "failed"
ROLLED_BACK = "rolled_back"

DEPLOYMENT_STATUSES = (PENDING, BUILDING, DEPLOYED, FAILED, ROLLED_BACK)

VERCEL_STATES = {
    "READY": DEPLOYED,
    "ERROR": FAILED,
    "BUILDING": BUILDING,
    "INITIALIZING": BUILDING,
    "QUEUED": PENDING,
    "CANCELED": ROLLED_BACK,
}

# Keyed on latest_stage.status; "success" only counts once the deploy stage is reached
CLOUDFLARE_STAGE_STATUSES = {
    "failure": FAILED,
    "canceled": ROLLED_BACK,
    "active": BUILDING,
}

GITHUB_STATES = {
    "success": DEPLOYED,
    "error": FAILED,
    "failure": FAILED,
    "pending": PENDING,
    "queued": PENDING,
    "in_progress": BUILDING,
    "inactive": ROLLED_BACK,
}


def map_vercel_state(state: Optional[str]) -> str:
    if not isinstance(state, str):
        return PENDING
    return VERCEL_STATES.get(state, PENDING)


def map_cloudflare_stage(stage: Optional[CloudflareStage]) -> str:
    if stage is None or not isinstance(stage.status, str):
        return PENDING
    if stage.status == "success":
        return DEPLOYED if stage.name == "deploy" else PENDING
    return CLOUDFLARE_STAGE_STATUSES.get(stage.status, PENDING)


def map_github_status(state: Optional[str]) -> str:
    if not isinstance(state, str):
        return PENDING
    return GITHUB_STATES.get(state, PENDING)


def classify_environment(name: Optional[str]) -> str:
    """production | staging | development, by case-insensitive substring."""
    lower = (name or "").lower()
    if "prod" in lower:
        return "production"
    if "stag" in lower or "preview" in lower:
        return "staging"
    return "development"
