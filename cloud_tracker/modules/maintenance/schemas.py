from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Literal, Optional
from datetime import datetime

from cloud_tracker.core.validators import blank_to_none

MaintenanceStatus = Literal["pending", "running", "completed", "failed", "skipped"]


class CommandTypeResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    recommended_frequency_days: int
    sort_order: int = 0
    is_active: bool = True

    class Config:
        from_attributes = True


class MaintenanceRunCreate(BaseModel):
    application_id: str
    command_type_id: str
    status: MaintenanceStatus = "completed"
    results: Optional[Dict[str, Any]] = None
    notes: Optional[str] = Field(None, max_length=1000)
    run_at: Optional[datetime] = None

    @field_validator("notes", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)


class MaintenanceRunUpdate(BaseModel):
    status: Optional[MaintenanceStatus] = None
    results: Optional[Dict[str, Any]] = None
    notes: Optional[str] = Field(None, max_length=1000)


class MaintenanceRunResponse(BaseModel):
    id: str
    application_id: str
    command_type_id: str
    status: str
    results: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    run_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    command_type: Optional[CommandTypeResponse] = None

    class Config:
        from_attributes = True


class MaintenanceStatusItem(BaseModel):
    command_type: CommandTypeResponse
    last_run_at: Optional[datetime] = None
    last_status: Optional[str] = None
    days_since_run: Optional[int] = None
    is_overdue: bool = False
    never_run: bool = True
