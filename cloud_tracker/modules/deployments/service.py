from supabase import Client
from cloud_tracker.modules.deployments.schemas import (
    DeploymentCreate, DeploymentUpdate, DeploymentResponse, DeploymentWithRelationsResponse
)
from cloud_tracker.core.dependencies import get_owned_application, get_user_application_ids
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class DeploymentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _rows_by_id(self, table: str, columns: str, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not ids:
            return {}
        result = self.supabase.table(table)\
            .select(columns)\
            .in_("id", list(set(ids)))\
            .execute()
        return {row["id"]: row for row in result.data or []}

    def attach_relations(self, rows: List[Dict[str, Any]]) -> List[DeploymentWithRelationsResponse]:
        """Resolve provider, environment and application for each deployment row"""
        providers = self._rows_by_id("cloud_providers", "*", [r["provider_id"] for r in rows])
        environments = self._rows_by_id("environments", "*", [r["environment_id"] for r in rows])
        applications = self._rows_by_id("applications", "id, name", [r["application_id"] for r in rows])
        return [
            DeploymentWithRelationsResponse(
                **row,
                provider=providers.get(row["provider_id"]),
                environment=environments.get(row["environment_id"]),
                application=applications.get(row["application_id"]),
            )
            for row in rows
        ]

    def _get_owned_row(self, deployment_id: str, user_id: str) -> Dict[str, Any]:
        result = self.supabase.table("deployments")\
            .select("*")\
            .eq("id", deployment_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Deployment not found")
        row = result.data[0]
        owner = self.supabase.table("applications")\
            .select("id")\
            .eq("id", row["application_id"])\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not owner.data:
            raise HTTPException(status_code=404, detail="Deployment not found")
        return row

    def _check_references(self, user_id: str, provider_id: Optional[str], environment_id: Optional[str]) -> None:
        if provider_id:
            provider = self.supabase.table("cloud_providers")\
                .select("id")\
                .eq("id", provider_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if not provider.data:
                raise HTTPException(status_code=404, detail="Provider not found")
        if environment_id:
            environment = self.supabase.table("environments")\
                .select("id")\
                .eq("id", environment_id)\
                .limit(1)\
                .execute()
            if not environment.data:
                raise HTTPException(status_code=404, detail="Environment not found")

    def create_deployment(self, deployment_data: DeploymentCreate, user_id: str) -> DeploymentResponse:
        """Record a deployment by hand (synced deployments are written by the sync module)"""
        try:
            get_owned_application(deployment_data.application_id, {"id": user_id}, self.supabase, columns="id")
            self._check_references(user_id, deployment_data.provider_id, deployment_data.environment_id)

            payload = deployment_data.model_dump(mode="json")
            if not payload.get("deployed_at"):
                payload["deployed_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("deployments").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create deployment")

            logger.info(f"Deployment {result.data[0]['id']} created for application {deployment_data.application_id}")
            return DeploymentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_deployment_by_id(self, deployment_id: str, user_id: str) -> DeploymentWithRelationsResponse:
        try:
            row = self._get_owned_row(deployment_id, user_id)
            return self.attach_relations([row])[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_deployments(
        self,
        user_id: str,
        application_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        environment_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[DeploymentWithRelationsResponse]:
        """Deployments across the user's applications, newest first"""
        try:
            app_ids = get_user_application_ids(user_id, self.supabase)
            if application_id:
                if application_id not in app_ids:
                    raise HTTPException(status_code=404, detail="Application not found or access denied")
                app_ids = [application_id]
            if not app_ids:
                return []

            query = self.supabase.table("deployments")\
                .select("*")\
                .in_("application_id", app_ids)
            if provider_id:
                query = query.eq("provider_id", provider_id)
            if environment_id:
                query = query.eq("environment_id", environment_id)
            if status:
                query = query.eq("status", status)

            result = query.order("deployed_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()

            return self.attach_relations(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_deployment(self, deployment_id: str, deployment_data: DeploymentUpdate, user_id: str) -> DeploymentResponse:
        try:
            self._get_owned_row(deployment_id, user_id)
            update_data = deployment_data.model_dump(mode="json", exclude_unset=True)

            if update_data.get("application_id"):
                get_owned_application(update_data["application_id"], {"id": user_id}, self.supabase, columns="id")
            self._check_references(user_id, update_data.get("provider_id"), update_data.get("environment_id"))

            if not update_data:
                return DeploymentResponse(**self._get_owned_row(deployment_id, user_id))

            result = self.supabase.table("deployments")\
                .update(update_data)\
                .eq("id", deployment_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Deployment not found")

            return DeploymentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_deployment(self, deployment_id: str, user_id: str) -> bool:
        try:
            self._get_owned_row(deployment_id, user_id)
            self.supabase.table("deployments")\
                .delete()\
                .eq("id", deployment_id)\
                .execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
