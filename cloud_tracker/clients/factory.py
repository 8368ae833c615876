import httpx
from typing import Any, Dict, Optional

from cloud_tracker.clients.vercel import VercelClient
from cloud_tracker.clients.cloudflare import CloudflareClient
from cloud_tracker.clients.github import GitHubClient


class ProviderClientFactory:
    """Builds provider clients from a user_settings row. Tests pass an httpx transport."""

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self.transport = transport

    def vercel(self, user_settings: Optional[Dict[str, Any]]) -> Optional[VercelClient]:
        if not user_settings or not user_settings.get("vercel_token"):
            return None
        return VercelClient(
            user_settings["vercel_token"],
            team_id=user_settings.get("vercel_team_id"),
            transport=self.transport,
        )

    def cloudflare(self, user_settings: Optional[Dict[str, Any]]) -> Optional[CloudflareClient]:
        if not user_settings or not user_settings.get("cloudflare_token") or not user_settings.get("cloudflare_account_id"):
            return None
        return CloudflareClient(
            user_settings["cloudflare_token"],
            user_settings["cloudflare_account_id"],
            transport=self.transport,
        )

    def github(self, token: Optional[str]) -> GitHubClient:
        return GitHubClient(token, transport=self.transport)

    def github_for(self, user_settings: Optional[Dict[str, Any]]) -> Optional[GitHubClient]:
        if not user_settings or not user_settings.get("github_token"):
            return None
        return self.github(user_settings["github_token"])


def get_client_factory() -> ProviderClientFactory:
    return ProviderClientFactory()
