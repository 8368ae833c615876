from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

from cloud_tracker.core.validators import blank_to_none

SessionSource = Literal["claude-code", "claude-ai", "mixed"]

_TEXT_FIELDS = ("starting_branch", "ending_branch", "context_id", "summary")


class SessionCreate(BaseModel):
    application_id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    starting_branch: Optional[str] = Field(None, max_length=200)
    ending_branch: Optional[str] = Field(None, max_length=200)
    commits_count: int = Field(0, ge=0)
    context_id: Optional[str] = Field(None, max_length=100)
    session_source: SessionSource = "claude-code"
    tokens_input: Optional[int] = Field(None, ge=0)
    tokens_output: Optional[int] = Field(None, ge=0)
    tokens_total: Optional[int] = Field(None, ge=0)
    summary: Optional[str] = Field(None, max_length=5000)
    accomplishments: List[str] = []
    next_steps: List[str] = []
    files_changed: List[str] = []
    maintenance_runs: List[str] = []
    security_findings: Optional[Dict[str, Any]] = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)


class ExternalSessionCreate(SessionCreate):
    """Posted by the coding-session hook when a session ends; started_at is required."""
    started_at: datetime


class SessionUpdate(BaseModel):
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    ending_branch: Optional[str] = Field(None, max_length=200)
    commits_count: Optional[int] = Field(None, ge=0)
    session_source: Optional[SessionSource] = None
    tokens_input: Optional[int] = Field(None, ge=0)
    tokens_output: Optional[int] = Field(None, ge=0)
    tokens_total: Optional[int] = Field(None, ge=0)
    summary: Optional[str] = Field(None, max_length=5000)
    accomplishments: Optional[List[str]] = None
    next_steps: Optional[List[str]] = None
    files_changed: Optional[List[str]] = None
    maintenance_runs: Optional[List[str]] = None
    security_findings: Optional[Dict[str, Any]] = None


class ExternalSessionUpdate(SessionUpdate):
    id: str


class SessionResponse(BaseModel):
    id: str
    application_id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    starting_branch: Optional[str] = None
    ending_branch: Optional[str] = None
    commits_count: Optional[int] = 0
    context_id: Optional[str] = None
    session_source: Optional[str] = None
    tokens_input: Optional[int] = None
    tokens_output: Optional[int] = None
    tokens_total: Optional[int] = None
    summary: Optional[str] = None
    accomplishments: Optional[List[str]] = []
    next_steps: Optional[List[str]] = []
    files_changed: Optional[List[str]] = []
    maintenance_runs: Optional[List[str]] = []
    security_findings: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionApplicationRef(BaseModel):
    id: str
    name: str


class SessionWithApplicationResponse(SessionResponse):
    application: Optional[SessionApplicationRef] = None


class SessionStats(BaseModel):
    total_sessions: int = 0
    total_duration_minutes: int = 0
    total_tokens: int = 0
    total_commits: int = 0


class ExternalSessionCreated(BaseModel):
    success: bool = True
    session_id: str


class ExternalSessionList(BaseModel):
    sessions: List[SessionResponse]


class ExternalApplication(BaseModel):
    id: str
    name: str
    status: Optional[str] = None
    tech_stack: Optional[List[str]] = []
    live_url: Optional[str] = None
    repository_url: Optional[str] = None


class ExternalApplicationList(BaseModel):
    applications: List[ExternalApplication]
