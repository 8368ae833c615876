from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime

from cloud_tracker.core.validators import blank_to_none, check_url
from cloud_tracker.modules.deployments.schemas import DeploymentWithRelationsResponse
from cloud_tracker.modules.tags.schemas import TagResponse

AppStatus = Literal["active", "inactive", "archived", "maintenance"]

URL_FIELDS = ("repository_url", "live_url")
NULLABLE_FIELDS = (
    "description", "repository_url", "live_url", "vercel_project_id",
    "cloudflare_project_name", "cloudflare_worker_name", "github_repo_name",
)


def _clean_stack(items: Optional[List[str]]) -> Optional[List[str]]:
    if items is None:
        return None
    return [s.strip() for s in items if s and s.strip()]


class ApplicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    repository_url: Optional[str] = None
    live_url: Optional[str] = None
    tech_stack: List[str] = []
    status: AppStatus = "active"
    tag_ids: List[str] = []
    vercel_project_id: Optional[str] = None
    cloudflare_project_name: Optional[str] = None
    cloudflare_worker_name: Optional[str] = None
    github_repo_name: Optional[str] = None

    @field_validator(*NULLABLE_FIELDS, mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator(*URL_FIELDS)
    @classmethod
    def valid_url(cls, v):
        return check_url(v)

    @field_validator("tech_stack")
    @classmethod
    def strip_stack(cls, v):
        return _clean_stack(v)


class ApplicationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    repository_url: Optional[str] = None
    live_url: Optional[str] = None
    tech_stack: Optional[List[str]] = None
    status: Optional[AppStatus] = None
    tag_ids: Optional[List[str]] = None  # None leaves tags alone, [] clears them
    vercel_project_id: Optional[str] = None
    cloudflare_project_name: Optional[str] = None
    cloudflare_worker_name: Optional[str] = None
    github_repo_name: Optional[str] = None

    @field_validator(*NULLABLE_FIELDS, mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator(*URL_FIELDS)
    @classmethod
    def valid_url(cls, v):
        return check_url(v)

    @field_validator("tech_stack")
    @classmethod
    def strip_stack(cls, v):
        return _clean_stack(v)


class ApplicationResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    repository_url: Optional[str] = None
    live_url: Optional[str] = None
    tech_stack: Optional[List[str]] = []
    status: str
    vercel_project_id: Optional[str] = None
    cloudflare_project_name: Optional[str] = None
    cloudflare_worker_name: Optional[str] = None
    github_repo_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tags: List[TagResponse] = []

    class Config:
        from_attributes = True


class ApplicationDetailResponse(ApplicationResponse):
    deployments: List[DeploymentWithRelationsResponse] = []


class DeleteAllResponse(BaseModel):
    deleted: int
    success: bool = True
