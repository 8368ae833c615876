from supabase import Client
from cloud_tracker.modules.sessions.schemas import (
    SessionCreate, SessionUpdate, SessionResponse, SessionWithApplicationResponse,
    SessionStats, ExternalSessionCreate, ExternalSessionUpdate, ExternalApplication
)
from cloud_tracker.core.dependencies import get_owned_application, get_user_application_ids
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import math
import logging

logger = logging.getLogger(__name__)


def duration_minutes(started_at: Optional[datetime], ended_at: Optional[datetime]) -> Optional[int]:
    """Whole minutes between start and end, half a minute rounding up."""
    if started_at is None or ended_at is None:
        return None
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    if ended_at.tzinfo is None:
        ended_at = ended_at.replace(tzinfo=timezone.utc)
    return math.floor((ended_at - started_at).total_seconds() / 60 + 0.5)


def tokens_total(tokens_input: Optional[int], tokens_output: Optional[int]) -> Optional[int]:
    if tokens_input is None or tokens_output is None:
        return None
    return tokens_input + tokens_output


def _parse(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class SessionService:
    """Session log for dashboard users. Ownership is checked through the session's application."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_owned_row(self, session_id: str, user_id: str) -> Dict[str, Any]:
        result = self.supabase.table("claude_sessions")\
            .select("*")\
            .eq("id", session_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Session not found")
        row = result.data[0]
        get_owned_application(row["application_id"], {"id": user_id}, self.supabase, columns="id")
        return row

    def list_sessions(self, application_id: str) -> List[SessionResponse]:
        try:
            result = self.supabase.table("claude_sessions")\
                .select("*")\
                .eq("application_id", application_id)\
                .order("started_at", desc=True)\
                .execute()
            return [SessionResponse(**s) for s in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching sessions: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch sessions")

    def get_session(self, session_id: str, user_id: str) -> SessionWithApplicationResponse:
        row = self._get_owned_row(session_id, user_id)
        app = self.supabase.table("applications")\
            .select("id, name")\
            .eq("id", row["application_id"])\
            .limit(1)\
            .execute()
        return SessionWithApplicationResponse(**row, application=app.data[0] if app.data else None)

    def list_recent_sessions(self, user_id: str, limit: int = 10) -> List[SessionWithApplicationResponse]:
        """Latest sessions across all of the user's applications"""
        try:
            app_ids = get_user_application_ids(user_id, self.supabase)
            if not app_ids:
                return []
            result = self.supabase.table("claude_sessions")\
                .select("*")\
                .in_("application_id", app_ids)\
                .order("started_at", desc=True)\
                .limit(limit)\
                .execute()
            rows = result.data or []
            apps = self.supabase.table("applications")\
                .select("id, name")\
                .in_("id", list({r["application_id"] for r in rows}) or app_ids)\
                .execute()
            names = {a["id"]: a for a in apps.data or []}
            return [SessionWithApplicationResponse(**r, application=names.get(r["application_id"])) for r in rows]
        except Exception as e:
            logger.error(f"Error fetching recent sessions: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch recent sessions")

    def get_stats(self, application_id: str) -> SessionStats:
        try:
            result = self.supabase.table("claude_sessions")\
                .select("duration_minutes, tokens_total, commits_count")\
                .eq("application_id", application_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching session stats: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch session stats")

        stats = SessionStats()
        for row in result.data or []:
            stats.total_sessions += 1
            stats.total_duration_minutes += row.get("duration_minutes") or 0
            stats.total_tokens += row.get("tokens_total") or 0
            stats.total_commits += row.get("commits_count") or 0
        return stats

    def _insert(self, session_data: SessionCreate) -> Dict[str, Any]:
        payload = session_data.model_dump(mode="json", exclude_none=True)
        started_at = session_data.started_at or datetime.now(timezone.utc)
        payload["started_at"] = started_at.isoformat()

        if session_data.duration_minutes is None:
            minutes = duration_minutes(started_at, session_data.ended_at)
            if minutes is not None:
                payload["duration_minutes"] = minutes
        if session_data.tokens_total is None:
            total = tokens_total(session_data.tokens_input, session_data.tokens_output)
            if total is not None:
                payload["tokens_total"] = total

        result = self.supabase.table("claude_sessions").insert(payload).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create session")
        return result.data[0]

    def create_session(self, session_data: SessionCreate, user_id: str) -> SessionResponse:
        get_owned_application(session_data.application_id, {"id": user_id}, self.supabase, columns="id")
        try:
            return SessionResponse(**self._insert(session_data))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating session: {e}")
            raise HTTPException(status_code=500, detail="Failed to create session")

    def _update(self, session_id: str, existing: Dict[str, Any], session_data: SessionUpdate) -> Dict[str, Any]:
        update_data = session_data.model_dump(mode="json", exclude_unset=True, exclude={"id"})

        if session_data.ended_at is not None and session_data.duration_minutes is None:
            minutes = duration_minutes(_parse(existing.get("started_at")), session_data.ended_at)
            if minutes is not None:
                update_data["duration_minutes"] = minutes
        if session_data.tokens_total is None:
            total = tokens_total(session_data.tokens_input, session_data.tokens_output)
            if total is not None:
                update_data["tokens_total"] = total

        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        result = self.supabase.table("claude_sessions")\
            .update(update_data)\
            .eq("id", session_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Session not found")
        return result.data[0]

    def update_session(self, session_id: str, session_data: SessionUpdate, user_id: str) -> SessionResponse:
        existing = self._get_owned_row(session_id, user_id)
        try:
            return SessionResponse(**self._update(session_id, existing, session_data))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating session {session_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update session")

    def delete_session(self, session_id: str, user_id: str) -> bool:
        self._get_owned_row(session_id, user_id)
        try:
            self.supabase.table("claude_sessions")\
                .delete()\
                .eq("id", session_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting session {session_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete session")


class ExternalSessionService(SessionService):
    """Token-authenticated API for the coding-session hook. Runs on the service-role client, so no per-user scoping."""

    def list_for_application(self, application_id: str) -> List[SessionResponse]:
        return self.list_sessions(application_id)

    def create(self, session_data: ExternalSessionCreate) -> str:
        app = self.supabase.table("applications")\
            .select("id")\
            .eq("id", session_data.application_id)\
            .limit(1)\
            .execute()
        if not app.data:
            raise HTTPException(status_code=404, detail="Application not found")
        try:
            row = self._insert(session_data)
            logger.info(f"External session {row['id']} recorded for application {session_data.application_id}")
            return row["id"]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating session: {e}")
            raise HTTPException(status_code=500, detail="Failed to create session")

    def update(self, session_data: ExternalSessionUpdate) -> None:
        existing = self.supabase.table("claude_sessions")\
            .select("started_at")\
            .eq("id", session_data.id)\
            .limit(1)\
            .execute()
        if not existing.data:
            raise HTTPException(status_code=404, detail="Session not found")
        try:
            self._update(session_data.id, existing.data[0], session_data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating session {session_data.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update session")

    def list_applications(self) -> List[ExternalApplication]:
        try:
            result = self.supabase.table("applications")\
                .select("id, name, status, tech_stack, live_url, repository_url")\
                .order("name")\
                .execute()
            return [ExternalApplication(**a) for a in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching applications: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch applications")
