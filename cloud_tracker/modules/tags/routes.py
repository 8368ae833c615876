from fastapi import APIRouter, Depends
from cloud_tracker.database.supabase_client import get_supabase
from cloud_tracker.modules.tags.schemas import TagCreate, TagUpdate, TagResponse
from cloud_tracker.modules.tags.service import TagService
from cloud_tracker.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/tags", tags=["tags"])


def get_tag_service(supabase: Client = Depends(get_supabase)) -> TagService:
    return TagService(supabase)


@router.post("", response_model=TagResponse, status_code=201)
async def create_tag(
    tag_data: TagCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service)
):
    return service.create_tag(tag_data, current_user["id"])


@router.get("", response_model=List[TagResponse])
async def list_tags(
    current_user: Dict = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service)
):
    return service.list_tags(current_user["id"])


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(
    tag_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service)
):
    return service.get_tag_by_id(tag_id, current_user["id"])


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: str,
    tag_data: TagUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service)
):
    return service.update_tag(tag_id, tag_data, current_user["id"])


@router.delete("/{tag_id}", status_code=204)
async def delete_tag(
    tag_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: TagService = Depends(get_tag_service)
):
    service.delete_tag(tag_id, current_user["id"])
    return None
