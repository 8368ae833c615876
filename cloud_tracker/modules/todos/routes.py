from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.todos.schemas import TodoCreate, TodoUpdate, TodoReorder, TodoResponse
from cloud_tracker.modules.todos.service import TodoService
from cloud_tracker.core.dependencies import get_current_user_id, check_application_access
from supabase import Client
from typing import List, Dict

router = APIRouter(tags=["todos"])


def get_todo_service(supabase: Client = Depends(get_supabase)) -> TodoService:
    return TodoService(supabase)


@router.get("/applications/{application_id}/todos", response_model=List[TodoResponse])
async def list_todos(
    application_id: str,
    current_user: Dict = Depends(check_application_access),
    service: TodoService = Depends(get_todo_service)
):
    return service.list_todos(application_id)


@router.post("/applications/{application_id}/todos", response_model=TodoResponse, status_code=201)
async def create_todo(
    application_id: str,
    todo_data: TodoCreate,
    current_user: Dict = Depends(check_application_access),
    service: TodoService = Depends(get_todo_service)
):
    return service.create_todo(application_id, todo_data, current_user["id"])


@router.post("/applications/{application_id}/todos/reorder", response_model=List[TodoResponse])
async def reorder_todos(
    application_id: str,
    reorder: TodoReorder,
    current_user: Dict = Depends(check_application_access),
    service: TodoService = Depends(get_todo_service)
):
    return service.reorder_todos(application_id, reorder.ordered_ids)


@router.patch("/todos/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: str,
    todo_data: TodoUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service)
):
    """Edit a todo's text or toggle it (completed: true/false)"""
    return service.update_todo(todo_id, todo_data, current_user["id"])


@router.delete("/todos/{todo_id}", status_code=204)
async def delete_todo(
    todo_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service)
):
    service.delete_todo(todo_id, current_user["id"])
    return None
