from supabase import Client
from lunchlog.modules.auth.service import clear_auth_cache
from lunchlog.modules.user_settings.schemas import (
    NotificationSettings, NotificationSettingsUpdate, DEFAULT_LUNCH_REMINDER_TIME
)
from typing import Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class UserSettingsService:
    def __init__(self, supabase: Optional[Client]):
        self.supabase = supabase

    def get_notification_settings(self, user_id: int) -> NotificationSettings:
        """Stored preferences, or the defaults when the row can't be read"""
        if self.supabase is None:
            logger.warning("Cannot read settings: database not available")
            return NotificationSettings()
        try:
            result = self.supabase.table("users")\
                .select("notification_enabled, lunch_reminder_time")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error reading settings for user {user_id}: {e}")
            return NotificationSettings()

        if not result.data:
            return NotificationSettings()
        row = result.data[0]
        enabled = row.get("notification_enabled")
        return NotificationSettings(
            enabled=True if enabled is None else enabled,
            lunch_reminder_time=row.get("lunch_reminder_time") or DEFAULT_LUNCH_REMINDER_TIME,
        )

    def update_notification_settings(self, user_id: int, settings_data: NotificationSettingsUpdate) -> None:
        if self.supabase is None:
            raise HTTPException(status_code=503, detail="Database not available")
        try:
            result = self.supabase.table("users")\
                .update({
                    "notification_enabled": settings_data.enabled,
                    "lunch_reminder_time": settings_data.lunch_reminder_time,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        # Cached users rows still carry the old preferences
        clear_auth_cache()
