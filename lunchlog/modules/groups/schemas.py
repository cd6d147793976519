from pydantic import Field
from typing import Optional, List
from datetime import datetime

from lunchlog.core.enums import GroupRole, MealCategory, MealType
from lunchlog.core.schemas import ApiModel

INVITE_CODE_LENGTH = 8


class GroupCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class GroupJoin(ApiModel):
    invite_code: str = Field(..., min_length=INVITE_CODE_LENGTH, max_length=INVITE_CODE_LENGTH)


class GroupResponse(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    invite_code: str
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserGroupResponse(GroupResponse):
    member_role: GroupRole = GroupRole.MEMBER


class GroupMemberResponse(ApiModel):
    id: int
    group_id: int
    user_id: int
    role: GroupRole
    joined_at: Optional[datetime] = None


class MemberUser(ApiModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None


class GroupMemberWithUser(ApiModel):
    member: GroupMemberResponse
    user: MemberUser


class GroupMealResponse(ApiModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    group_id: Optional[int] = None
    date: str
    meal_type: MealType
    dish_name: str
    category: MealCategory
    note: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
