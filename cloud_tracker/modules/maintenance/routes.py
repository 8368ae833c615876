from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.maintenance.schemas import (
    CommandTypeResponse, MaintenanceRunCreate, MaintenanceRunUpdate,
    MaintenanceRunResponse, MaintenanceStatusItem
)
from cloud_tracker.modules.maintenance.service import MaintenanceService
from cloud_tracker.core.dependencies import get_current_user_id, check_application_access
from supabase import Client
from typing import List, Dict

router = APIRouter(tags=["maintenance"])


def get_maintenance_service(supabase: Client = Depends(get_supabase)) -> MaintenanceService:
    return MaintenanceService(supabase)


@router.get("/maintenance/command-types", response_model=List[CommandTypeResponse])
async def list_command_types(
    current_user: Dict = Depends(get_current_user_id),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    return service.list_command_types()


@router.get("/applications/{application_id}/maintenance/runs", response_model=List[MaintenanceRunResponse])
async def list_maintenance_runs(
    application_id: str,
    current_user: Dict = Depends(check_application_access),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    return service.list_runs(application_id)


@router.get("/applications/{application_id}/maintenance/status", response_model=List[MaintenanceStatusItem])
async def get_maintenance_status(
    application_id: str,
    current_user: Dict = Depends(check_application_access),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    """Per command type: when it last ran and whether it is overdue"""
    return service.get_latest_status(application_id)


@router.post("/maintenance/runs", response_model=MaintenanceRunResponse, status_code=201)
async def create_maintenance_run(
    run_data: MaintenanceRunCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    return service.create_run(run_data, current_user["id"])


@router.patch("/maintenance/runs/{run_id}", response_model=MaintenanceRunResponse)
async def update_maintenance_run(
    run_id: str,
    run_data: MaintenanceRunUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    return service.update_run(run_id, run_data, current_user["id"])


@router.delete("/maintenance/runs/{run_id}", status_code=204)
async def delete_maintenance_run(
    run_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: MaintenanceService = Depends(get_maintenance_service)
):
    service.delete_run(run_id, current_user["id"])
    return None
