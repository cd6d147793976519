from fastapi import APIRouter, Depends
from lunchlog.database.supabase_client import get_supabase
from lunchlog.core.dependencies import get_current_user
from lunchlog.core.schemas import SuccessResponse
from lunchlog.modules.user_settings.schemas import NotificationSettings, NotificationSettingsUpdate
from lunchlog.modules.user_settings.service import UserSettingsService
from supabase import Client
from typing import Optional, Dict

router = APIRouter(prefix="/settings", tags=["settings"])


def get_user_settings_service(supabase: Optional[Client] = Depends(get_supabase)) -> UserSettingsService:
    return UserSettingsService(supabase)


@router.get("", response_model=NotificationSettings)
async def get_settings(
    user_data: Dict = Depends(get_current_user),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    return service.get_notification_settings(user_data["id"])


@router.put("/notifications", response_model=SuccessResponse)
async def update_notification_settings(
    settings_data: NotificationSettingsUpdate,
    user_data: Dict = Depends(get_current_user),
    service: UserSettingsService = Depends(get_user_settings_service)
):
    """Turn the lunch reminder on or off and set its time"""
    service.update_notification_settings(user_data["id"], settings_data)
    return SuccessResponse()
