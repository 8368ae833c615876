from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from cloud_tracker.core.validators import blank_to_none, check_url

SLUG_PATTERN = r"^[a-z0-9-]+$"


class ProviderCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    slug: str = Field(..., min_length=1, max_length=50, pattern=SLUG_PATTERN)
    icon_name: Optional[str] = Field(None, max_length=50)
    base_url: Optional[str] = None

    @field_validator("icon_name", "base_url", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("base_url")
    @classmethod
    def valid_url(cls, v):
        return check_url(v)


class ProviderUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    slug: Optional[str] = Field(None, min_length=1, max_length=50, pattern=SLUG_PATTERN)
    icon_name: Optional[str] = Field(None, max_length=50)
    base_url: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("icon_name", "base_url", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("base_url")
    @classmethod
    def valid_url(cls, v):
        return check_url(v)


class ProviderResponse(BaseModel):
    id: str
    user_id: str
    name: str
    slug: str
    icon_name: Optional[str] = None
    base_url: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProviderWithCountsResponse(ProviderResponse):
    deployment_count: int = 0
    app_count: int = 0
