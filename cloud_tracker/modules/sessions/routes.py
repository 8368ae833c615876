from fastapi import APIRouter, Depends, HTTPException, Query
from cloud_tracker.database.supabase_client import get_supabase, get_service_supabase
from cloud_tracker.modules.sessions.schemas import (
    SessionCreate, SessionUpdate, SessionResponse, SessionWithApplicationResponse, SessionStats,
    ExternalSessionCreate, ExternalSessionUpdate, ExternalSessionCreated,
    ExternalSessionList, ExternalApplicationList
)
from cloud_tracker.modules.sessions.service import SessionService, ExternalSessionService
from cloud_tracker.core.dependencies import get_current_user_id, check_application_access, verify_api_token
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(tags=["sessions"])
external_router = APIRouter(prefix="/external", tags=["external"])


def get_session_service(supabase: Client = Depends(get_supabase)) -> SessionService:
    return SessionService(supabase)


def get_external_session_service(supabase: Client = Depends(get_service_supabase)) -> ExternalSessionService:
    return ExternalSessionService(supabase)


@router.get("/applications/{application_id}/sessions", response_model=List[SessionResponse])
async def list_sessions(
    application_id: str,
    current_user: Dict = Depends(check_application_access),
    service: SessionService = Depends(get_session_service)
):
    return service.list_sessions(application_id)


@router.get("/applications/{application_id}/sessions/stats", response_model=SessionStats)
async def get_session_stats(
    application_id: str,
    current_user: Dict = Depends(check_application_access),
    service: SessionService = Depends(get_session_service)
):
    return service.get_stats(application_id)


@router.get("/sessions/recent", response_model=List[SessionWithApplicationResponse])
async def list_recent_sessions(
    limit: int = Query(10, ge=1, le=100),
    current_user: Dict = Depends(get_current_user_id),
    service: SessionService = Depends(get_session_service)
):
    return service.list_recent_sessions(current_user["id"], limit)


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    session_data: SessionCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: SessionService = Depends(get_session_service)
):
    return service.create_session(session_data, current_user["id"])


@router.get("/sessions/{session_id}", response_model=SessionWithApplicationResponse)
async def get_session(
    session_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: SessionService = Depends(get_session_service)
):
    return service.get_session(session_id, current_user["id"])


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    session_data: SessionUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: SessionService = Depends(get_session_service)
):
    return service.update_session(session_id, session_data, current_user["id"])


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: SessionService = Depends(get_session_service)
):
    service.delete_session(session_id, current_user["id"])
    return None


# Token-authenticated endpoints for the coding-session hook

@external_router.get("/sessions", response_model=ExternalSessionList)
async def external_list_sessions(
    application_id: Optional[str] = None,
    authorized: bool = Depends(verify_api_token),
    service: ExternalSessionService = Depends(get_external_session_service)
):
    if not application_id:
        raise HTTPException(status_code=400, detail="application_id required")
    return ExternalSessionList(sessions=service.list_for_application(application_id))


@external_router.post("/sessions", response_model=ExternalSessionCreated, status_code=201)
async def external_create_session(
    session_data: ExternalSessionCreate,
    authorized: bool = Depends(verify_api_token),
    service: ExternalSessionService = Depends(get_external_session_service)
):
    return ExternalSessionCreated(session_id=service.create(session_data))


@external_router.patch("/sessions")
async def external_update_session(
    session_data: ExternalSessionUpdate,
    authorized: bool = Depends(verify_api_token),
    service: ExternalSessionService = Depends(get_external_session_service)
):
    service.update(session_data)
    return {"success": True}


@external_router.get("/applications", response_model=ExternalApplicationList)
async def external_list_applications(
    authorized: bool = Depends(verify_api_token),
    service: ExternalSessionService = Depends(get_external_session_service)
):
    return ExternalApplicationList(applications=service.list_applications())
