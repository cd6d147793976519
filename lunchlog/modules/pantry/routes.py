from fastapi import APIRouter, Depends, Query
from lunchlog.database.supabase_client import get_supabase
from lunchlog.core.dependencies import get_current_user, check_group_member
from lunchlog.core.schemas import IdResponse, SuccessResponse
from lunchlog.modules.pantry.schemas import PantryItemCreate, PantryItemUpdate, PantryItemResponse
from lunchlog.modules.pantry.service import PantryService
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/pantry", tags=["pantry"])


def get_pantry_service(supabase: Optional[Client] = Depends(get_supabase)) -> PantryService:
    return PantryService(supabase)


@router.post("", response_model=IdResponse, status_code=201)
async def create_pantry_item(
    item_data: PantryItemCreate,
    user_data: Dict = Depends(get_current_user),
    service: PantryService = Depends(get_pantry_service),
    supabase: Optional[Client] = Depends(get_supabase)
):
    if item_data.group_id is not None:
        check_group_member(item_data.group_id, user_data, supabase)
    return IdResponse(id=service.create_item(item_data, user_data["id"]))


@router.get("", response_model=List[PantryItemResponse])
async def list_pantry_items(
    group_id: Optional[int] = Query(None, alias="groupId"),
    user_data: Dict = Depends(get_current_user),
    service: PantryService = Depends(get_pantry_service),
    supabase: Optional[Client] = Depends(get_supabase)
):
    """Caller's pantry, or a group's pantry (only if user is a member)"""
    if group_id is not None:
        check_group_member(group_id, user_data, supabase)
    return service.list_items(user_data["id"], group_id)


@router.patch("/{item_id}", response_model=SuccessResponse)
async def update_pantry_item(
    item_id: int,
    item_data: PantryItemUpdate,
    user_data: Dict = Depends(get_current_user),
    service: PantryService = Depends(get_pantry_service)
):
    service.update_item(item_id, item_data, user_data["id"])
    return SuccessResponse()
