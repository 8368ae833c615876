from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.deployments.schemas import (
    DeploymentCreate, DeploymentUpdate, DeploymentResponse, DeploymentWithRelationsResponse
)
from cloud_tracker.modules.deployments.service import DeploymentService
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/deployments", tags=["deployments"])


def get_deployment_service(supabase: Client = Depends(get_supabase)) -> DeploymentService:
    return DeploymentService(supabase)


@router.post("", response_model=DeploymentResponse, status_code=201)
async def create_deployment(
    deployment_data: DeploymentCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: DeploymentService = Depends(get_deployment_service)
):
    return service.create_deployment(deployment_data, current_user["id"])


@router.get("", response_model=List[DeploymentWithRelationsResponse])
async def list_deployments(
    application_id: Optional[str] = None,
    provider_id: Optional[str] = None,
    environment_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    current_user: Dict = Depends(get_current_user_id),
    service: DeploymentService = Depends(get_deployment_service)
):
    """List deployments with provider, environment and application attached"""
    return service.list_deployments(
        user_id=current_user["id"],
        application_id=application_id,
        provider_id=provider_id,
        environment_id=environment_id,
        status=status,
        limit=limit,
        offset=offset
    )


@router.get("/{deployment_id}", response_model=DeploymentWithRelationsResponse)
async def get_deployment(
    deployment_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: DeploymentService = Depends(get_deployment_service)
):
    return service.get_deployment_by_id(deployment_id, current_user["id"])


@router.put("/{deployment_id}", response_model=DeploymentResponse)
async def update_deployment(
    deployment_id: str,
    deployment_data: DeploymentUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: DeploymentService = Depends(get_deployment_service)
):
    return service.update_deployment(deployment_id, deployment_data, current_user["id"])


@router.delete("/{deployment_id}", status_code=204)
async def delete_deployment(
    deployment_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: DeploymentService = Depends(get_deployment_service)
):
    service.delete_deployment(deployment_id, current_user["id"])
    return None
