"""
Core dependencies for authentication, group access checks and shared clients
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from lunchlog.config.recommendations_config import FALLBACK_RECOMMENDATIONS
from lunchlog.core.completion import CompletionClient
from lunchlog.database.supabase_client import get_supabase
from lunchlog.modules.auth.service import AuthService
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Optional[Client] = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the bearer token to the application's users row"""
    return auth_service.get_current_user(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Like get_current_user, but None for anonymous (guest) requests"""
    if credentials is None:
        return None
    return auth_service.get_current_user(credentials.credentials)


def is_group_member(group_id: int, user_id: int, supabase: Optional[Client]) -> bool:
    if supabase is None:
        return False
    try:
        member_result = supabase.table("group_members")\
            .select("id")\
            .eq("group_id", group_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return bool(member_result.data)
    except Exception as e:
        logger.error(f"Error checking group membership: {e}")
        return False


def check_group_member(
    group_id: int,
    user_data: Dict[str, Any],
    supabase: Optional[Client]
) -> Dict[str, Any]:
    """Check if user is a member of a group"""
    if is_group_member(group_id, user_data["id"], supabase):
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a member of this group"
    )


def get_completion_client(request: Request) -> Optional[CompletionClient]:
    return getattr(request.app.state, "completion_client", None)


def get_object_storage(request: Request):
    """S3Storage instance, or None when object storage is not configured."""
    return getattr(request.app.state, "object_storage", None)


def get_fallback_recommendations() -> List[Dict[str, str]]:
    """Fallback recommendation set; override in tests to substitute another set."""
    return FALLBACK_RECOMMENDATIONS
