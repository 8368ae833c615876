from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.notes.schemas import NoteCreate, NoteUpdate, NoteResponse
from cloud_tracker.modules.notes.service import NoteService
from cloud_tracker.core.dependencies import get_current_user_id, check_application_access
from supabase import Client
from typing import List, Dict

router = APIRouter(tags=["notes"])


def get_note_service(supabase: Client = Depends(get_supabase)) -> NoteService:
    return NoteService(supabase)


@router.get("/applications/{application_id}/notes", response_model=List[NoteResponse])
async def list_notes(
    application_id: str,
    current_user: Dict = Depends(check_application_access),
    service: NoteService = Depends(get_note_service)
):
    return service.list_notes(application_id)


@router.post("/applications/{application_id}/notes", response_model=NoteResponse, status_code=201)
async def create_note(
    application_id: str,
    note_data: NoteCreate,
    current_user: Dict = Depends(check_application_access),
    service: NoteService = Depends(get_note_service)
):
    return service.create_note(application_id, note_data, current_user["id"])


@router.put("/notes/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    note_data: NoteUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service)
):
    return service.update_note(note_id, note_data, current_user["id"])


@router.delete("/notes/{note_id}", status_code=204)
async def delete_note(
    note_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service)
):
    service.delete_note(note_id, current_user["id"])
    return None
