from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.applications.schemas import (
    ApplicationCreate, ApplicationUpdate, ApplicationResponse,
    ApplicationDetailResponse, DeleteAllResponse
)
from cloud_tracker.modules.applications.service import ApplicationService
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/applications", tags=["applications"])


def get_application_service(supabase: Client = Depends(get_supabase)) -> ApplicationService:
    return ApplicationService(supabase)


@router.post("", response_model=ApplicationResponse, status_code=201)
async def create_application(
    application_data: ApplicationCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service)
):
    return service.create_application(application_data, current_user["id"])


@router.get("", response_model=List[ApplicationResponse])
async def list_applications(
    search: Optional[str] = None,
    status: Optional[str] = None,
    current_user: Dict = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service)
):
    """List applications, optionally filtered by name/description search and status"""
    return service.list_applications(current_user["id"], search=search, status=status)


@router.delete("", response_model=DeleteAllResponse)
async def delete_all_applications(
    current_user: Dict = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service)
):
    """Delete all of the caller's applications"""
    deleted = service.delete_all_applications(current_user["id"])
    return DeleteAllResponse(deleted=deleted)


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
async def get_application(
    application_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service)
):
    return service.get_application(application_id, current_user["id"])


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    application_data: ApplicationUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service)
):
    return service.update_application(application_id, application_data, current_user["id"])


@router.delete("/{application_id}", status_code=204)
async def delete_application(
    application_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service)
):
    service.delete_application(application_id, current_user["id"])
    return None
