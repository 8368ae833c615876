from supabase import Client
from cloud_tracker.modules.applications.schemas import (
    ApplicationCreate, ApplicationUpdate, ApplicationResponse, ApplicationDetailResponse
)
from cloud_tracker.modules.deployments.service import DeploymentService
from cloud_tracker.modules.tags.service import TagService
from cloud_tracker.core.dependencies import get_owned_application
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# Characters that would break a PostgREST or=(...) filter
_FILTER_RESERVED = str.maketrans("", "", ",()*%\\")


class ApplicationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.tags = TagService(supabase)

    def _with_tags(self, rows: List[Dict[str, Any]]) -> List[ApplicationResponse]:
        tags_by_app = self.tags.get_tags_by_application([r["id"] for r in rows])
        return [ApplicationResponse(**row, tags=tags_by_app.get(row["id"], [])) for row in rows]

    def _set_tags(self, application_id: str, tag_ids: List[str], user_id: str) -> None:
        """Replace the application's tags. Tags not owned by the user are ignored."""
        self.supabase.table("application_tags")\
            .delete()\
            .eq("application_id", application_id)\
            .execute()
        if not tag_ids:
            return
        owned = self.supabase.table("tags")\
            .select("id")\
            .eq("user_id", user_id)\
            .in_("id", tag_ids)\
            .execute()
        owned_ids = [t["id"] for t in owned.data or []]
        if not owned_ids:
            return
        try:
            self.supabase.table("application_tags").insert([
                {"application_id": application_id, "tag_id": tag_id}
                for tag_id in owned_ids
            ]).execute()
        except Exception as e:
            logger.error(f"Error adding tags to application {application_id}: {e}")

    def create_application(self, application_data: ApplicationCreate, user_id: str) -> ApplicationResponse:
        try:
            payload = application_data.model_dump(exclude={"tag_ids"})
            payload["user_id"] = user_id

            result = self.supabase.table("applications").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create application")

            app = result.data[0]
            if application_data.tag_ids:
                self._set_tags(app["id"], application_data.tag_ids, user_id)

            logger.info(f"Application {app['id']} created by user {user_id}")
            return self._with_tags([app])[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_applications(
        self,
        user_id: str,
        search: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[ApplicationResponse]:
        """The user's applications, most recently updated first"""
        try:
            query = self.supabase.table("applications")\
                .select("*")\
                .eq("user_id", user_id)

            term = (search or "").translate(_FILTER_RESERVED).strip()
            if term:
                query = query.or_(f"name.ilike.%{term}%,description.ilike.%{term}%")

            if status and status != "all":
                query = query.eq("status", status)

            result = query.order("updated_at", desc=True).execute()
            return self._with_tags(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_application(self, application_id: str, user_id: str) -> ApplicationDetailResponse:
        """Application with its tags and deployments (provider and environment resolved)"""
        try:
            app = get_owned_application(application_id, {"id": user_id}, self.supabase)
            tags = self.tags.get_tags_by_application([application_id]).get(application_id, [])

            deployments = self.supabase.table("deployments")\
                .select("*")\
                .eq("application_id", application_id)\
                .order("deployed_at", desc=True)\
                .execute()

            return ApplicationDetailResponse(
                **app,
                tags=tags,
                deployments=DeploymentService(self.supabase).attach_relations(deployments.data or []),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_application(self, application_id: str, application_data: ApplicationUpdate, user_id: str) -> ApplicationResponse:
        try:
            get_owned_application(application_id, {"id": user_id}, self.supabase, columns="id")

            update_data = application_data.model_dump(exclude_unset=True, exclude={"tag_ids"})
            if "name" in update_data and update_data["name"] is None:
                del update_data["name"]
            if "status" in update_data and update_data["status"] is None:
                del update_data["status"]

            if update_data:
                result = self.supabase.table("applications")\
                    .update(update_data)\
                    .eq("id", application_id)\
                    .eq("user_id", user_id)\
                    .execute()
                if not result.data:
                    raise HTTPException(status_code=404, detail="Application not found")
                app = result.data[0]
            else:
                app = get_owned_application(application_id, {"id": user_id}, self.supabase)

            if application_data.tag_ids is not None:
                self._set_tags(application_id, application_data.tag_ids, user_id)

            return self._with_tags([app])[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_application(self, application_id: str, user_id: str) -> bool:
        try:
            get_owned_application(application_id, {"id": user_id}, self.supabase, columns="id")
            self.supabase.table("applications")\
                .delete()\
                .eq("id", application_id)\
                .eq("user_id", user_id)\
                .execute()
            logger.info(f"Application {application_id} deleted by user {user_id}")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_all_applications(self, user_id: str) -> int:
        """Delete every application of the user (child rows cascade). Returns how many were deleted."""
        try:
            result = self.supabase.table("applications")\
                .delete()\
                .eq("user_id", user_id)\
                .execute()
            deleted = len(result.data or [])
            logger.warning(f"User {user_id} deleted all applications ({deleted})")
            return deleted
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
