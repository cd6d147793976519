from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPAuthorizationCredentials
from lunchlog.core.dependencies import get_auth_service, get_optional_user, optional_security
from lunchlog.core.schemas import SuccessResponse
from lunchlog.modules.auth.schemas import UserResponse
from lunchlog.modules.auth.service import AuthService
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=Optional[UserResponse])
async def get_me(
    user_data: Optional[Dict] = Depends(get_optional_user),
):
    """Current user, or null for guests"""
    return user_data


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    service: AuthService = Depends(get_auth_service)
):
    """Logout; always succeeds from the client's point of view"""
    service.logout(credentials.credentials if credentials else None)
    return SuccessResponse()
