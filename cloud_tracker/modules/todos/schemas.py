from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class TodoCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=500)


class TodoUpdate(BaseModel):
    text: Optional[str] = Field(None, min_length=1, max_length=500)
    completed: Optional[bool] = None


class TodoReorder(BaseModel):
    ordered_ids: List[str]


class TodoResponse(BaseModel):
    id: str
    application_id: str
    user_id: str
    text: str
    completed: bool = False
    sort_order: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
