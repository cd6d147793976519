from typing import Optional
from datetime import datetime

from lunchlog.core.enums import UserRole
from lunchlog.core.schemas import ApiModel


class UserResponse(ApiModel):
    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: UserRole = UserRole.USER
    notification_enabled: Optional[bool] = True
    lunch_reminder_time: Optional[str] = "12:00"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None
