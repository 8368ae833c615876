from supabase import Client
from cloud_tracker.modules.notes.schemas import NoteCreate, NoteUpdate, NoteResponse
from datetime import datetime, timezone
from typing import List
from fastapi import HTTPException


class NoteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_notes(self, application_id: str) -> List[NoteResponse]:
        """Newest first"""
        try:
            result = self.supabase.table("app_notes")\
                .select("*")\
                .eq("application_id", application_id)\
                .order("created_at", desc=True)\
                .execute()
            return [NoteResponse(**n) for n in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_note(self, application_id: str, note_data: NoteCreate, user_id: str) -> NoteResponse:
        try:
            result = self.supabase.table("app_notes").insert({
                "application_id": application_id,
                "user_id": user_id,
                "content": note_data.content
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create note")

            return NoteResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_note(self, note_id: str, note_data: NoteUpdate, user_id: str) -> NoteResponse:
        try:
            result = self.supabase.table("app_notes")\
                .update({
                    "content": note_data.content,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", note_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Note not found")

            return NoteResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_note(self, note_id: str, user_id: str) -> bool:
        try:
            result = self.supabase.table("app_notes")\
                .delete()\
                .eq("id", note_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Note not found")

            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
