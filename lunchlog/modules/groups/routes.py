from fastapi import APIRouter, Depends, Query
from lunchlog.database.supabase_client import get_supabase
from lunchlog.core.dependencies import get_current_user, check_group_member
from lunchlog.core.schemas import DATE_PATTERN, SuccessResponse
from lunchlog.modules.groups.schemas import (
    GroupCreate, GroupJoin, GroupResponse, UserGroupResponse,
    GroupMemberWithUser, GroupMealResponse
)
from lunchlog.modules.groups.service import GroupService
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Optional[Client] = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group; the caller becomes its owner"""
    return service.create_group(group_data, user_data["id"])


@router.get("", response_model=List[UserGroupResponse])
async def my_groups(
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Groups the caller belongs to, with the caller's role"""
    return service.get_user_groups(user_data["id"])


@router.post("/join", response_model=GroupResponse)
async def join_group(
    join_data: GroupJoin,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Join a group by invite code"""
    return service.join_group(join_data.invite_code.upper(), user_data["id"])


@router.get("/{group_id}", response_model=Optional[GroupResponse])
async def get_group(
    group_id: int,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Get group by ID, or null"""
    return service.get_group_by_id(group_id)


@router.get("/{group_id}/members", response_model=List[GroupMemberWithUser])
async def get_members(
    group_id: int,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Optional[Client] = Depends(get_supabase)
):
    """List all members of a group (only if user is a member)"""
    check_group_member(group_id, user_data, supabase)
    return service.get_group_members(group_id)


@router.post("/{group_id}/leave", response_model=SuccessResponse)
async def leave_group(
    group_id: int,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Leave a group; succeeds even when not a member"""
    service.leave_group(group_id, user_data["id"])
    return SuccessResponse()


@router.delete("/{group_id}", response_model=SuccessResponse)
async def delete_group(
    group_id: int,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Delete a group (owner only)"""
    service.delete_group(group_id, user_data["id"])
    return SuccessResponse()


@router.get("/{group_id}/meals", response_model=List[GroupMealResponse])
async def get_meals_for_date(
    group_id: int,
    date: str = Query(..., pattern=DATE_PATTERN),
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Optional[Client] = Depends(get_supabase)
):
    """All members' meals on a date (only if user is a member)"""
    check_group_member(group_id, user_data, supabase)
    return service.get_group_meals_for_date(group_id, date)
