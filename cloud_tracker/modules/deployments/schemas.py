from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

from cloud_tracker.core.validators import blank_to_none, check_url
from cloud_tracker.modules.environments.schemas import EnvironmentResponse
from cloud_tracker.modules.providers.schemas import ProviderResponse

DeploymentStatus = Literal["pending", "building", "deployed", "failed", "rolled_back"]


class DeploymentCreate(BaseModel):
    application_id: str
    provider_id: str
    environment_id: str
    url: Optional[str] = None
    branch: Optional[str] = Field(None, max_length=100)
    commit_sha: Optional[str] = Field(None, max_length=40)
    status: DeploymentStatus = "deployed"
    deployed_at: Optional[datetime] = None

    @field_validator("url", "branch", "commit_sha", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("url")
    @classmethod
    def valid_url(cls, v):
        return check_url(v)


class DeploymentUpdate(BaseModel):
    application_id: Optional[str] = None
    provider_id: Optional[str] = None
    environment_id: Optional[str] = None
    url: Optional[str] = None
    branch: Optional[str] = Field(None, max_length=100)
    commit_sha: Optional[str] = Field(None, max_length=40)
    status: Optional[DeploymentStatus] = None
    deployed_at: Optional[datetime] = None

    @field_validator("url", "branch", "commit_sha", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("url")
    @classmethod
    def valid_url(cls, v):
        return check_url(v)


class ApplicationRef(BaseModel):
    id: str
    name: str


class DeploymentResponse(BaseModel):
    id: str
    application_id: str
    provider_id: str
    environment_id: str
    external_id: Optional[str] = None
    url: Optional[str] = None
    branch: Optional[str] = None
    commit_sha: Optional[str] = None
    status: str
    deployed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DeploymentWithRelationsResponse(DeploymentResponse):
    provider: Optional[ProviderResponse] = None
    environment: Optional[EnvironmentResponse] = None
    application: Optional[ApplicationRef] = None
