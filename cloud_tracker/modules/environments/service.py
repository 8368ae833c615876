from supabase import Client
from cloud_tracker.modules.environments.schemas import EnvironmentResponse
from typing import Dict, List
from fastapi import HTTPException


class EnvironmentService:
    """Global reference environments. Rows are seeded, never created through the API."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _rows(self, columns: str = "*") -> List[Dict]:
        result = self.supabase.table("environments")\
            .select(columns)\
            .order("sort_order")\
            .execute()
        return result.data or []

    def list_environments(self) -> List[EnvironmentResponse]:
        """All environments, ordered development -> production"""
        try:
            return [EnvironmentResponse(**env) for env in self._rows()]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_ids_by_slug(self) -> Dict[str, str]:
        """slug -> id, used to place synced deployments"""
        return {env["slug"]: env["id"] for env in self._rows("id, slug")}

    def get_environment_by_id(self, environment_id: str) -> EnvironmentResponse:
        try:
            result = self.supabase.table("environments")\
                .select("*")\
                .eq("id", environment_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Environment not found")

            return EnvironmentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
