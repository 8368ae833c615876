from supabase import Client
from cloud_tracker.modules.user_settings.schemas import (
    VercelSettingsUpdate, CloudflareSettingsUpdate, GitHubSettingsUpdate,
    UserSettingsResponse, ConnectionTestResponse, LinkableProject
)
from cloud_tracker.clients.factory import ProviderClientFactory
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserSettingsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_settings_row(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Raw settings row including tokens. Server-side use only."""
        result = self.supabase.table("user_settings")\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_settings(self, user_id: str) -> UserSettingsResponse:
        try:
            row = self.get_settings_row(user_id) or {}
            return UserSettingsResponse(
                has_vercel_token=bool(row.get("vercel_token")),
                vercel_team_id=row.get("vercel_team_id"),
                has_cloudflare_token=bool(row.get("cloudflare_token")) and bool(row.get("cloudflare_account_id")),
                cloudflare_account_id=row.get("cloudflare_account_id"),
                has_github_token=bool(row.get("github_token")),
                github_username=row.get("github_username"),
                updated_at=row.get("updated_at"),
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _upsert(self, user_id: str, values: Dict[str, Any]) -> UserSettingsResponse:
        try:
            self.supabase.table("user_settings").upsert(
                {"user_id": user_id, **values, "updated_at": _now()},
                on_conflict="user_id"
            ).execute()
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))
        return self.get_settings(user_id)

    def _clear(self, user_id: str, fields: List[str]) -> None:
        try:
            values = {field: None for field in fields}
            values["updated_at"] = _now()
            self.supabase.table("user_settings")\
                .update(values)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=400, detail=str(e))

    def save_vercel(self, user_id: str, data: VercelSettingsUpdate) -> UserSettingsResponse:
        return self._upsert(user_id, {
            "vercel_token": data.vercel_token,
            "vercel_team_id": data.vercel_team_id or None,
        })

    def delete_vercel(self, user_id: str) -> None:
        self._clear(user_id, ["vercel_token", "vercel_team_id"])

    def save_cloudflare(self, user_id: str, data: CloudflareSettingsUpdate) -> UserSettingsResponse:
        return self._upsert(user_id, {
            "cloudflare_token": data.cloudflare_token,
            "cloudflare_account_id": data.cloudflare_account_id,
        })

    def delete_cloudflare(self, user_id: str) -> None:
        self._clear(user_id, ["cloudflare_token", "cloudflare_account_id"])

    def save_github(self, user_id: str, data: GitHubSettingsUpdate) -> UserSettingsResponse:
        return self._upsert(user_id, {
            "github_token": data.github_token,
            "github_username": data.github_username or None,
        })

    def delete_github(self, user_id: str) -> None:
        self._clear(user_id, ["github_token", "github_username"])

    # Connection tests use the submitted credentials, not the stored ones

    def test_vercel(self, data: VercelSettingsUpdate, clients: ProviderClientFactory) -> ConnectionTestResponse:
        client = clients.vercel(data.model_dump())
        with client:
            ok, error = client.test_connection()
        return ConnectionTestResponse(success=ok, error=error)

    def test_cloudflare(self, data: CloudflareSettingsUpdate, clients: ProviderClientFactory) -> ConnectionTestResponse:
        client = clients.cloudflare(data.model_dump())
        with client:
            ok, error = client.test_connection()
        return ConnectionTestResponse(success=ok, error=error)

    def test_github(self, data: GitHubSettingsUpdate, clients: ProviderClientFactory) -> ConnectionTestResponse:
        with clients.github(data.github_token) as client:
            login = client.get_authenticated_login()
        if login is None:
            return ConnectionTestResponse(success=False, error="Failed to connect to GitHub")
        return ConnectionTestResponse(success=True, login=login)

    # Project pickers for linking an application by hand

    def list_vercel_projects(self, user_id: str, clients: ProviderClientFactory) -> List[LinkableProject]:
        client = clients.vercel(self.get_settings_row(user_id))
        if client is None:
            return []
        with client:
            projects = client.list_projects()
        return [
            LinkableProject(
                id=p.id,
                name=p.name,
                framework=p.framework,
                repo_name=p.link.repo if p.link else None,
            )
            for p in projects
        ]

    def list_cloudflare_projects(self, user_id: str, clients: ProviderClientFactory) -> List[LinkableProject]:
        client = clients.cloudflare(self.get_settings_row(user_id))
        if client is None:
            return []
        with client:
            projects = client.list_pages_projects()
        return [LinkableProject(id=p.name, name=p.name, repo_name=p.repo_name) for p in projects]
