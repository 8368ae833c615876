from pydantic import BaseModel, Field
from typing import Optional

COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"
DEFAULT_COLOR = "#3b82f6"


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=30)
    color: str = Field(DEFAULT_COLOR, pattern=COLOR_PATTERN)


class TagUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=30)
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)


class TagResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: str
    color: str = DEFAULT_COLOR

    class Config:
        from_attributes = True
