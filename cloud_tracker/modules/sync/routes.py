from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.clients.factory import ProviderClientFactory, get_client_factory
from cloud_tracker.core.dependencies import get_optional_user
from cloud_tracker.core.results import ActionResult
from cloud_tracker.modules.sync.schemas import SyncCounts, SyncAllResult
from cloud_tracker.modules.sync.service import DeploymentSyncService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/sync", tags=["sync"])


def get_sync_service(
    supabase: Client = Depends(get_supabase),
    clients: ProviderClientFactory = Depends(get_client_factory)
) -> DeploymentSyncService:
    return DeploymentSyncService(supabase, clients)


# Sync endpoints block on provider HTTP calls, so they run as plain defs in the threadpool

@router.post("/applications/{application_id}/vercel", response_model=ActionResult[SyncCounts])
def sync_vercel(
    application_id: str,
    user: Optional[dict] = Depends(get_optional_user),
    service: DeploymentSyncService = Depends(get_sync_service)
):
    """Pull Vercel deployments for the linked project into the deployments table"""
    return service.sync_vercel_deployments(application_id, user)


@router.post("/applications/{application_id}/cloudflare", response_model=ActionResult[SyncCounts])
def sync_cloudflare(
    application_id: str,
    user: Optional[dict] = Depends(get_optional_user),
    service: DeploymentSyncService = Depends(get_sync_service)
):
    """Pull Cloudflare Pages deployments for the linked project"""
    return service.sync_cloudflare_deployments(application_id, user)


@router.post("/applications/{application_id}/github", response_model=ActionResult[SyncCounts])
def sync_github(
    application_id: str,
    user: Optional[dict] = Depends(get_optional_user),
    service: DeploymentSyncService = Depends(get_sync_service)
):
    """Pull GitHub deployments (with their latest status) for the linked repo"""
    return service.sync_github_deployments(application_id, user)


@router.post("/all", response_model=ActionResult[SyncAllResult])
def sync_all(
    user: Optional[dict] = Depends(get_optional_user),
    service: DeploymentSyncService = Depends(get_sync_service)
):
    return service.sync_all_deployments(user)
