from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from cloud_tracker.clients.cloudflare import ACCOUNT_ID_PATTERN


class VercelSettingsUpdate(BaseModel):
    vercel_token: str = Field(..., min_length=1)
    vercel_team_id: Optional[str] = None


class CloudflareSettingsUpdate(BaseModel):
    cloudflare_token: str = Field(..., min_length=1)
    cloudflare_account_id: str = Field(..., pattern=ACCOUNT_ID_PATTERN)


class GitHubSettingsUpdate(BaseModel):
    github_token: str = Field(..., min_length=1)
    github_username: Optional[str] = None


class UserSettingsResponse(BaseModel):
    has_vercel_token: bool = False
    vercel_team_id: Optional[str] = None
    has_cloudflare_token: bool = False
    cloudflare_account_id: Optional[str] = None
    has_github_token: bool = False
    github_username: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConnectionTestResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    login: Optional[str] = None


class LinkableProject(BaseModel):
    """A provider project that can be linked to an application."""
    id: str
    name: str
    framework: Optional[str] = None
    repo_name: Optional[str] = None
