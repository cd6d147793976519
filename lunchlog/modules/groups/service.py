from supabase import Client
from lunchlog.modules.groups.schemas import (
    GroupCreate, GroupResponse, UserGroupResponse, GroupMemberResponse,
    GroupMemberWithUser, MemberUser, GroupMealResponse, INVITE_CODE_LENGTH
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging
import secrets

logger = logging.getLogger(__name__)

# No 0/O, 1/I/L: codes are read aloud and typed by hand
INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
MAX_INVITE_CODE_ATTEMPTS = 5


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


class GroupService:
    def __init__(self, supabase: Optional[Client]):
        self.supabase = supabase

    def _require_db(self) -> Client:
        if self.supabase is None:
            raise HTTPException(status_code=503, detail="Database not available")
        return self.supabase

    def _unused_invite_code(self) -> str:
        for _ in range(MAX_INVITE_CODE_ATTEMPTS):
            code = generate_invite_code()
            if self.get_group_by_invite_code(code) is None:
                return code
        raise HTTPException(status_code=500, detail="Could not allocate an invite code")

    def create_group(self, group_data: GroupCreate, owner_id: int) -> GroupResponse:
        """Create a group and add the creator as its owner, as one unit"""
        supabase = self._require_db()
        try:
            result = supabase.table("groups").insert({
                "name": group_data.name,
                "description": group_data.description,
                "invite_code": self._unused_invite_code(),
                "owner_id": owner_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create group")
            group = result.data[0]

            # Add creator as owner; without this row the group is unreachable, so undo it
            try:
                member_result = supabase.table("group_members").insert({
                    "group_id": group["id"],
                    "user_id": owner_id,
                    "role": "owner"
                }).execute()
                if not member_result.data:
                    raise HTTPException(status_code=500, detail="Failed to add group owner")
            except Exception:
                logger.error(f"Owner membership insert failed for group {group['id']}; removing group")
                supabase.table("groups").delete().eq("id", group["id"]).execute()
                raise

            logger.info(f"Group {group['id']} created by user {owner_id}")
            return GroupResponse(**group)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _get_one(self, column: str, value: Any) -> Optional[GroupResponse]:
        if self.supabase is None:
            logger.warning("Cannot get group: database not available")
            return None
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .eq(column, value)\
                .limit(1)\
                .execute()
            return GroupResponse(**result.data[0]) if result.data else None
        except Exception as e:
            logger.error(f"Error getting group by {column}: {e}")
            return None

    def get_group_by_id(self, group_id: int) -> Optional[GroupResponse]:
        return self._get_one("id", group_id)

    def get_group_by_invite_code(self, invite_code: str) -> Optional[GroupResponse]:
        return self._get_one("invite_code", invite_code)

    def get_user_groups(self, user_id: int) -> List[UserGroupResponse]:
        """Groups the user belongs to, each with the user's role in it"""
        if self.supabase is None:
            logger.warning("Cannot get user groups: database not available")
            return []
        try:
            memberships = self.supabase.table("group_members")\
                .select("group_id, role")\
                .eq("user_id", user_id)\
                .execute()
            if not memberships.data:
                return []
            roles = {m["group_id"]: m["role"] for m in memberships.data}
            groups_result = self.supabase.table("groups")\
                .select("*")\
                .in_("id", list(roles.keys()))\
                .execute()
            return [
                UserGroupResponse(**group, member_role=roles.get(group["id"], "member"))
                for group in groups_result.data or []
            ]
        except Exception as e:
            logger.error(f"Error getting user groups: {e}")
            return []

    def _member_rows(self, group_id: int) -> List[Dict[str, Any]]:
        result = self.supabase.table("group_members")\
            .select("*")\
            .eq("group_id", group_id)\
            .execute()
        return result.data or []

    def _users_by_id(self, user_ids: List[int]) -> Dict[int, Dict[str, Any]]:
        result = self.supabase.table("users")\
            .select("id, name, email")\
            .in_("id", user_ids)\
            .execute()
        return {u["id"]: u for u in result.data or []}

    def get_group_members(self, group_id: int) -> List[GroupMemberWithUser]:
        """Members joined with their user's display fields"""
        if self.supabase is None:
            logger.warning("Cannot get group members: database not available")
            return []
        try:
            members = self._member_rows(group_id)
            if not members:
                return []
            users = self._users_by_id([m["user_id"] for m in members])
            return [
                GroupMemberWithUser(
                    member=GroupMemberResponse(**member),
                    user=MemberUser(**users.get(member["user_id"], {"id": member["user_id"]})),
                )
                for member in members
            ]
        except Exception as e:
            logger.error(f"Error getting group members: {e}")
            return []

    def join_group(self, invite_code: str, user_id: int) -> GroupResponse:
        """Join a group by invite code"""
        supabase = self._require_db()
        group = self.get_group_by_invite_code(invite_code)
        if group is None:
            raise HTTPException(status_code=404, detail="Invalid invite code")
        try:
            # Check if already a member
            existing = supabase.table("group_members")\
                .select("id")\
                .eq("group_id", group.id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()

            if existing.data:
                raise HTTPException(status_code=400, detail="Already a member of this group")

            result = supabase.table("group_members").insert({
                "group_id": group.id,
                "user_id": user_id,
                "role": "member"
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to join group")

            return group
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def leave_group(self, group_id: int, user_id: int) -> None:
        """Remove the membership row if present"""
        supabase = self._require_db()
        try:
            supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_group(self, group_id: int, caller_id: int) -> None:
        """Delete a group and its memberships; owner only"""
        supabase = self._require_db()
        group = self.get_group_by_id(group_id)
        if group is None or group.owner_id != caller_id:
            raise HTTPException(status_code=403, detail="Not authorized to delete this group")
        try:
            # Delete group members first
            supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .execute()

            supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()
            logger.info(f"Group {group_id} deleted by owner {caller_id}")
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_group_meals_for_date(self, group_id: int, date: str) -> List[GroupMealResponse]:
        """Every member's meals on a date, with the member's name"""
        if self.supabase is None:
            logger.warning("Cannot get group meals: database not available")
            return []
        try:
            user_ids = [m["user_id"] for m in self._member_rows(group_id)]
            if not user_ids:
                return []
            meals_result = self.supabase.table("meal_records")\
                .select("*")\
                .in_("user_id", user_ids)\
                .eq("date", date)\
                .execute()
            users = self._users_by_id(user_ids)
            return [
                GroupMealResponse(**meal, user_name=users.get(meal["user_id"], {}).get("name"))
                for meal in meals_result.data or []
            ]
        except Exception as e:
            logger.error(f"Error getting group meals: {e}")
            return []
