from pydantic import Field, HttpUrl
from typing import Optional
from datetime import datetime

from lunchlog.core.enums import MealCategory, MealType
from lunchlog.core.schemas import ApiModel, DATE_PATTERN


class MealCreate(ApiModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    meal_type: MealType
    dish_name: str = Field(..., min_length=1, max_length=255)
    category: MealCategory
    note: Optional[str] = Field(None, max_length=500)
    image_url: Optional[HttpUrl] = None
    group_id: Optional[int] = None
    is_favorite: bool = False


class MealRecordResponse(ApiModel):
    id: int
    user_id: int
    group_id: Optional[int] = None
    date: str
    meal_type: MealType
    dish_name: str
    category: MealCategory
    note: Optional[str] = None
    image_url: Optional[str] = None
    is_favorite: Optional[bool] = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MealCreateResponse(ApiModel):
    id: int
