from supabase import Client, PostgrestAPIError
from cloud_tracker.modules.tags.schemas import TagCreate, TagUpdate, TagResponse
from typing import Dict, List
from fastapi import HTTPException

UNIQUE_VIOLATION = "23505"


class TagService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _write_error(self, e: PostgrestAPIError) -> HTTPException:
        if e.code == UNIQUE_VIOLATION:
            return HTTPException(status_code=400, detail="A tag with this name already exists")
        return HTTPException(status_code=400, detail=e.message or str(e))

    def create_tag(self, tag_data: TagCreate, user_id: str) -> TagResponse:
        try:
            result = self.supabase.table("tags").insert({
                "name": tag_data.name,
                "color": tag_data.color,
                "user_id": user_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create tag")

            return TagResponse(**result.data[0])
        except HTTPException:
            raise
        except PostgrestAPIError as e:
            raise self._write_error(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_tag_by_id(self, tag_id: str, user_id: str) -> TagResponse:
        try:
            result = self.supabase.table("tags")\
                .select("*")\
                .eq("id", tag_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Tag not found")

            return TagResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_tags(self, user_id: str) -> List[TagResponse]:
        try:
            result = self.supabase.table("tags")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("name")\
                .execute()
            return [TagResponse(**t) for t in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_tag(self, tag_id: str, tag_data: TagUpdate, user_id: str) -> TagResponse:
        update_data = tag_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return self.get_tag_by_id(tag_id, user_id)

        try:
            result = self.supabase.table("tags")\
                .update(update_data)\
                .eq("id", tag_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Tag not found")

            return TagResponse(**result.data[0])
        except HTTPException:
            raise
        except PostgrestAPIError as e:
            raise self._write_error(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_tag(self, tag_id: str, user_id: str) -> bool:
        self.get_tag_by_id(tag_id, user_id)
        try:
            self.supabase.table("tags")\
                .delete()\
                .eq("id", tag_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_tags_by_application(self, application_ids: List[str]) -> Dict[str, List[TagResponse]]:
        """application_id -> tags, for attaching tags to a page of applications"""
        if not application_ids:
            return {}
        links = self.supabase.table("application_tags")\
            .select("application_id, tag_id")\
            .in_("application_id", application_ids)\
            .execute()
        tag_ids = list({link["tag_id"] for link in links.data or []})
        if not tag_ids:
            return {}
        tags = self.supabase.table("tags")\
            .select("*")\
            .in_("id", tag_ids)\
            .execute()
        tags_by_id = {t["id"]: TagResponse(**t) for t in tags.data or []}

        by_app: Dict[str, List[TagResponse]] = {}
        for link in links.data or []:
            tag = tags_by_id.get(link["tag_id"])
            if tag:
                by_app.setdefault(link["application_id"], []).append(tag)
        return by_app

    def get_or_create_tag(self, name: str, color: str, user_id: str) -> str:
        """Id of the user's tag with this name, creating it if needed"""
        existing = self.supabase.table("tags")\
            .select("id")\
            .eq("user_id", user_id)\
            .eq("name", name)\
            .limit(1)\
            .execute()
        if existing.data:
            return existing.data[0]["id"]
        return self.create_tag(TagCreate(name=name, color=color), user_id).id
