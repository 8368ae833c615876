from supabase import Client, PostgrestAPIError
from cloud_tracker.modules.providers.schemas import (
    ProviderCreate, ProviderUpdate, ProviderResponse, ProviderWithCountsResponse
)
from typing import Dict, List, Set
from fastapi import HTTPException

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class ProviderService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _duplicate_slug(self, e: PostgrestAPIError) -> HTTPException:
        if e.code == UNIQUE_VIOLATION:
            return HTTPException(status_code=400, detail="A provider with this slug already exists")
        return HTTPException(status_code=400, detail=e.message or str(e))

    def create_provider(self, provider_data: ProviderCreate, user_id: str) -> ProviderResponse:
        try:
            result = self.supabase.table("cloud_providers").insert({
                **provider_data.model_dump(),
                "user_id": user_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create provider")

            return ProviderResponse(**result.data[0])
        except HTTPException:
            raise
        except PostgrestAPIError as e:
            raise self._duplicate_slug(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_provider_by_id(self, provider_id: str, user_id: str) -> ProviderResponse:
        try:
            result = self.supabase.table("cloud_providers")\
                .select("*")\
                .eq("id", provider_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Provider not found")

            return ProviderResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_providers(self, user_id: str) -> List[ProviderResponse]:
        try:
            result = self.supabase.table("cloud_providers")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("name")\
                .execute()
            return [ProviderResponse(**p) for p in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_providers_with_counts(self, user_id: str) -> List[ProviderWithCountsResponse]:
        """Providers with how many deployments and distinct applications use each"""
        providers = self.list_providers(user_id)
        if not providers:
            return []
        try:
            result = self.supabase.table("deployments")\
                .select("provider_id, application_id")\
                .in_("provider_id", [p.id for p in providers])\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        deployment_counts: Dict[str, int] = {}
        app_ids: Dict[str, Set[str]] = {}
        for row in result.data or []:
            pid = row["provider_id"]
            deployment_counts[pid] = deployment_counts.get(pid, 0) + 1
            app_ids.setdefault(pid, set()).add(row["application_id"])

        return [
            ProviderWithCountsResponse(
                **p.model_dump(),
                deployment_count=deployment_counts.get(p.id, 0),
                app_count=len(app_ids.get(p.id, ())),
            )
            for p in providers
        ]

    def update_provider(self, provider_id: str, provider_data: ProviderUpdate, user_id: str) -> ProviderResponse:
        update_data = provider_data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_provider_by_id(provider_id, user_id)

        try:
            result = self.supabase.table("cloud_providers")\
                .update(update_data)\
                .eq("id", provider_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Provider not found")

            return ProviderResponse(**result.data[0])
        except HTTPException:
            raise
        except PostgrestAPIError as e:
            raise self._duplicate_slug(e)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_provider(self, provider_id: str, user_id: str) -> bool:
        self.get_provider_by_id(provider_id, user_id)
        try:
            self.supabase.table("cloud_providers")\
                .delete()\
                .eq("id", provider_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except PostgrestAPIError as e:
            if e.code == FOREIGN_KEY_VIOLATION:
                raise HTTPException(status_code=400, detail="Cannot delete provider with existing deployments")
            raise HTTPException(status_code=400, detail=e.message or str(e))
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
