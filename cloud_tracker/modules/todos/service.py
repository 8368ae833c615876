from supabase import Client
from cloud_tracker.modules.todos.schemas import TodoCreate, TodoUpdate, TodoResponse
from typing import List
from fastapi import HTTPException


class TodoService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_todos(self, application_id: str) -> List[TodoResponse]:
        try:
            result = self.supabase.table("app_todos")\
                .select("*")\
                .eq("application_id", application_id)\
                .order("sort_order")\
                .order("created_at")\
                .execute()
            return [TodoResponse(**t) for t in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_todo(self, application_id: str, todo_data: TodoCreate, user_id: str) -> TodoResponse:
        """Append a todo after the application's current last one"""
        try:
            last = self.supabase.table("app_todos")\
                .select("sort_order")\
                .eq("application_id", application_id)\
                .order("sort_order", desc=True)\
                .limit(1)\
                .execute()
            next_order = last.data[0]["sort_order"] + 1 if last.data else 0

            result = self.supabase.table("app_todos").insert({
                "application_id": application_id,
                "user_id": user_id,
                "text": todo_data.text,
                "sort_order": next_order
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create todo")

            return TodoResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_todo(self, todo_id: str, user_id: str) -> TodoResponse:
        try:
            result = self.supabase.table("app_todos")\
                .select("*")\
                .eq("id", todo_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Todo not found")

            return TodoResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_todo(self, todo_id: str, todo_data: TodoUpdate, user_id: str) -> TodoResponse:
        """Edit the text and/or toggle completion"""
        update_data = todo_data.model_dump(exclude_none=True)
        if not update_data:
            return self.get_todo(todo_id, user_id)

        try:
            result = self.supabase.table("app_todos")\
                .update(update_data)\
                .eq("id", todo_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Todo not found")

            return TodoResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_todo(self, todo_id: str, user_id: str) -> bool:
        self.get_todo(todo_id, user_id)
        try:
            self.supabase.table("app_todos")\
                .delete()\
                .eq("id", todo_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def reorder_todos(self, application_id: str, ordered_ids: List[str]) -> List[TodoResponse]:
        """sort_order becomes each id's position in ordered_ids"""
        try:
            for index, todo_id in enumerate(ordered_ids):
                self.supabase.table("app_todos")\
                    .update({"sort_order": index})\
                    .eq("id", todo_id)\
                    .eq("application_id", application_id)\
                    .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return self.list_todos(application_id)
