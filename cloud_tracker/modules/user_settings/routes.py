from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.user_settings.schemas import (
    VercelSettingsUpdate, CloudflareSettingsUpdate, GitHubSettingsUpdate,
    UserSettingsResponse, ConnectionTestResponse, LinkableProject
)
from cloud_tracker.modules.user_settings.service import UserSettingsService
from cloud_tracker.clients.factory import ProviderClientFactory, get_client_factory
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/settings", tags=["settings"])


def get_user_settings_service(supabase: Client = Depends(get_supabase)) -> UserSettingsService:
    return UserSettingsService(supabase)


@router.get("", response_model=UserSettingsResponse)
async def get_settings(
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    """Which provider credentials are configured (tokens are never returned)"""
    return service.get_settings(current_user["id"])


@router.put("/vercel", response_model=UserSettingsResponse)
async def save_vercel_settings(
    data: VercelSettingsUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    return service.save_vercel(current_user["id"], data)


@router.delete("/vercel", status_code=204)
async def delete_vercel_settings(
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    service.delete_vercel(current_user["id"])
    return None


@router.post("/vercel/test", response_model=ConnectionTestResponse)
def test_vercel_settings(
    data: VercelSettingsUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service),
    clients: ProviderClientFactory = Depends(get_client_factory)
):
    return service.test_vercel(data, clients)


@router.get("/vercel/projects", response_model=List[LinkableProject])
def list_vercel_projects(
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service),
    clients: ProviderClientFactory = Depends(get_client_factory)
):
    """Vercel projects visible to the stored token, for linking an application"""
    return service.list_vercel_projects(current_user["id"], clients)


@router.put("/cloudflare", response_model=UserSettingsResponse)
async def save_cloudflare_settings(
    data: CloudflareSettingsUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    return service.save_cloudflare(current_user["id"], data)


@router.delete("/cloudflare", status_code=204)
async def delete_cloudflare_settings(
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    service.delete_cloudflare(current_user["id"])
    return None


@router.post("/cloudflare/test", response_model=ConnectionTestResponse)
def test_cloudflare_settings(
    data: CloudflareSettingsUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service),
    clients: ProviderClientFactory = Depends(get_client_factory)
):
    return service.test_cloudflare(data, clients)


@router.get("/cloudflare/projects", response_model=List[LinkableProject])
def list_cloudflare_projects(
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service),
    clients: ProviderClientFactory = Depends(get_client_factory)
):
    return service.list_cloudflare_projects(current_user["id"], clients)


@router.put("/github", response_model=UserSettingsResponse)
async def save_github_settings(
    data: GitHubSettingsUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    return service.save_github(current_user["id"], data)


@router.delete("/github", status_code=204)
async def delete_github_settings(
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    service.delete_github(current_user["id"])
    return None


@router.post("/github/test", response_model=ConnectionTestResponse)
def test_github_settings(
    data: GitHubSettingsUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: UserSettingsService = Depends(get_user_settings_service),
    clients: ProviderClientFactory = Depends(get_client_factory)
):
    return service.test_github(data, clients)
