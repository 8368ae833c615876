from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class StatusCounts(BaseModel):
    active: int = 0
    inactive: int = 0
    maintenance: int = 0
    archived: int = 0


class EnvironmentCounts(BaseModel):
    development: int = 0
    staging: int = 0
    production: int = 0


class DashboardStats(BaseModel):
    total_applications: int = 0
    total_deployments: int = 0
    active_providers: int = 0
    total_tags: int = 0
    status_counts: StatusCounts = Field(default_factory=StatusCounts)
    environment_counts: EnvironmentCounts = Field(default_factory=EnvironmentCounts)


class RecentApplication(BaseModel):
    id: str
    name: str
    status: Optional[str] = None
    updated_at: Optional[datetime] = None
