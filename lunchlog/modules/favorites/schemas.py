from pydantic import Field, HttpUrl
from typing import Optional
from datetime import datetime

from lunchlog.core.enums import MealCategory, MealType
from lunchlog.core.schemas import ApiModel, DATE_PATTERN


class FavoriteCreate(ApiModel):
    dish_name: str = Field(..., min_length=1, max_length=255)
    category: MealCategory
    note: Optional[str] = Field(None, max_length=500)
    image_url: Optional[HttpUrl] = None


class FavoriteResponse(ApiModel):
    id: int
    user_id: int
    dish_name: str
    category: MealCategory
    note: Optional[str] = None
    image_url: Optional[str] = None
    usage_count: int = 0
    last_used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FavoriteUse(ApiModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    meal_type: MealType
    group_id: Optional[int] = None


class FavoriteUseResponse(ApiModel):
    meal_id: int
    usage_count: int
