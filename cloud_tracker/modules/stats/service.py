from supabase import Client
from cloud_tracker.modules.stats.schemas import DashboardStats, RecentApplication
from cloud_tracker.modules.deployments.schemas import DeploymentWithRelationsResponse
from cloud_tracker.modules.deployments.service import DeploymentService
from cloud_tracker.core.dependencies import get_user_application_ids
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_dashboard_stats(self, user_id: str) -> DashboardStats:
        """Counts for the dashboard cards. Unknown statuses and environment slugs are not counted."""
        try:
            applications = self.supabase.table("applications")\
                .select("id, status")\
                .eq("user_id", user_id)\
                .execute().data or []
            app_ids = [a["id"] for a in applications]

            deployments = []
            if app_ids:
                deployments = self.supabase.table("deployments")\
                    .select("environment_id")\
                    .in_("application_id", app_ids)\
                    .execute().data or []

            providers = self.supabase.table("cloud_providers")\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("is_active", True)\
                .execute().data or []
            tags = self.supabase.table("tags")\
                .select("id")\
                .eq("user_id", user_id)\
                .execute().data or []
            environments = self.supabase.table("environments")\
                .select("id, slug")\
                .execute().data or []
        except Exception as e:
            logger.error(f"Error computing dashboard stats for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        stats = DashboardStats(
            total_applications=len(applications),
            total_deployments=len(deployments),
            active_providers=len(providers),
            total_tags=len(tags),
        )

        for app in applications:
            status = app.get("status")
            if status in type(stats.status_counts).model_fields:
                setattr(stats.status_counts, status, getattr(stats.status_counts, status) + 1)

        slugs = {e["id"]: e["slug"] for e in environments}
        for deployment in deployments:
            slug = slugs.get(deployment.get("environment_id"))
            if slug in type(stats.environment_counts).model_fields:
                setattr(stats.environment_counts, slug, getattr(stats.environment_counts, slug) + 1)

        return stats

    def get_recent_deployments(self, user_id: str, limit: int = 5) -> List[DeploymentWithRelationsResponse]:
        try:
            app_ids = get_user_application_ids(user_id, self.supabase)
            if not app_ids:
                return []
            result = self.supabase.table("deployments")\
                .select("*")\
                .in_("application_id", app_ids)\
                .order("deployed_at", desc=True)\
                .limit(limit)\
                .execute()
            return DeploymentService(self.supabase).attach_relations(result.data or [])
        except Exception as e:
            logger.error(f"Error fetching recent deployments: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_recent_applications(self, user_id: str, limit: int = 5) -> List[RecentApplication]:
        try:
            result = self.supabase.table("applications")\
                .select("id, name, status, updated_at")\
                .eq("user_id", user_id)\
                .order("updated_at", desc=True)\
                .limit(limit)\
                .execute()
            return [RecentApplication(**a) for a in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching recent applications: {e}")
            raise HTTPException(status_code=500, detail=str(e))
