from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.providers.schemas import (
    ProviderCreate, ProviderUpdate, ProviderResponse, ProviderWithCountsResponse
)
from cloud_tracker.modules.providers.service import ProviderService
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/providers", tags=["providers"])


def get_provider_service(supabase: Client = Depends(get_supabase)) -> ProviderService:
    return ProviderService(supabase)


@router.post("", response_model=ProviderResponse, status_code=201)
async def create_provider(
    provider_data: ProviderCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: ProviderService = Depends(get_provider_service)
):
    return service.create_provider(provider_data, current_user["id"])


@router.get("", response_model=List[ProviderResponse])
async def list_providers(
    current_user: Dict = Depends(get_current_user_id),
    service: ProviderService = Depends(get_provider_service)
):
    return service.list_providers(current_user["id"])


@router.get("/with-counts", response_model=List[ProviderWithCountsResponse])
async def list_providers_with_counts(
    current_user: Dict = Depends(get_current_user_id),
    service: ProviderService = Depends(get_provider_service)
):
    """Providers with deployment and application counts"""
    return service.list_providers_with_counts(current_user["id"])


@router.get("/{provider_id}", response_model=ProviderResponse)
async def get_provider(
    provider_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: ProviderService = Depends(get_provider_service)
):
    return service.get_provider_by_id(provider_id, current_user["id"])


@router.put("/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: str,
    provider_data: ProviderUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: ProviderService = Depends(get_provider_service)
):
    return service.update_provider(provider_id, provider_data, current_user["id"])


@router.delete("/{provider_id}", status_code=204)
async def delete_provider(
    provider_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: ProviderService = Depends(get_provider_service)
):
    """Delete a provider. Fails with 400 while deployments still reference it."""
    service.delete_provider(provider_id, current_user["id"])
    return None
