from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.environments.schemas import EnvironmentResponse
from cloud_tracker.modules.environments.service import EnvironmentService
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/environments", tags=["environments"])


def get_environment_service(supabase: Client = Depends(get_supabase)) -> EnvironmentService:
    return EnvironmentService(supabase)


@router.get("", response_model=List[EnvironmentResponse])
async def list_environments(
    current_user: Dict = Depends(get_current_user_id),
    service: EnvironmentService = Depends(get_environment_service)
):
    return service.list_environments()


@router.get("/{environment_id}", response_model=EnvironmentResponse)
async def get_environment(
    environment_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: EnvironmentService = Depends(get_environment_service)
):
    return service.get_environment_by_id(environment_id)
