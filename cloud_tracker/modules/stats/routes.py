from fastapi import APIRouter, Depends, Query
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.stats.schemas import DashboardStats, RecentApplication
from cloud_tracker.modules.stats.service import StatsService
from cloud_tracker.modules.deployments.schemas import DeploymentWithRelationsResponse
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/stats", tags=["stats"])


def get_stats_service(supabase: Client = Depends(get_supabase)) -> StatsService:
    return StatsService(supabase)


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: Dict = Depends(get_current_user_id),
    service: StatsService = Depends(get_stats_service)
):
    return service.get_dashboard_stats(current_user["id"])


@router.get("/recent-deployments", response_model=List[DeploymentWithRelationsResponse])
async def get_recent_deployments(
    limit: int = Query(5, ge=1, le=50),
    current_user: Dict = Depends(get_current_user_id),
    service: StatsService = Depends(get_stats_service)
):
    return service.get_recent_deployments(current_user["id"], limit)


@router.get("/recent-applications", response_model=List[RecentApplication])
async def get_recent_applications(
    limit: int = Query(5, ge=1, le=50),
    current_user: Dict = Depends(get_current_user_id),
    service: StatsService = Depends(get_stats_service)
):
    return service.get_recent_applications(current_user["id"], limit)
