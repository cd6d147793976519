from pydantic import Field, model_validator

from lunchlog.core.schemas import ApiModel, TIME_PATTERN

DEFAULT_LUNCH_REMINDER_TIME = "12:00"


class NotificationSettings(ApiModel):
    enabled: bool = True
    lunch_reminder_time: str = DEFAULT_LUNCH_REMINDER_TIME


class NotificationSettingsUpdate(ApiModel):
    enabled: bool
    lunch_reminder_time: str = Field(..., pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_reminder_time(self):
        hours, minutes = (int(part) for part in self.lunch_reminder_time.split(":"))
        if hours > 23 or minutes > 59:
            raise ValueError("lunchReminderTime must be between 00:00 and 23:59")
        return self
