from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.clients.factory import ProviderClientFactory, get_client_factory
from cloud_tracker.core.dependencies import get_optional_user
from cloud_tracker.core.results import ActionResult
from cloud_tracker.modules.auto_connect.schemas import AutoConnectResult
from cloud_tracker.modules.auto_connect.service import AutoConnectService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/auto-connect", tags=["auto-connect"])


def get_auto_connect_service(
    supabase: Client = Depends(get_supabase),
    clients: ProviderClientFactory = Depends(get_client_factory)
) -> AutoConnectService:
    return AutoConnectService(supabase, clients)


@router.post("", response_model=ActionResult[AutoConnectResult])
def auto_connect(
    user: Optional[dict] = Depends(get_optional_user),
    service: AutoConnectService = Depends(get_auto_connect_service)
):
    """Link every application to matching Vercel/Cloudflare/GitHub projects by repository name"""
    return service.auto_connect_providers(user)
