from pydantic import Field
from typing import List, Literal, Optional

from lunchlog.core.enums import MealCategory, MealType
from lunchlog.core.schemas import ApiModel, DATE_PATTERN


class LocalMealRecord(ApiModel):
    """A meal recorded on the device before login"""
    id: Optional[str] = None
    date: str = Field(..., pattern=DATE_PATTERN)
    meal_type: MealType
    dish_name: str = Field(..., min_length=1, max_length=255)
    category: MealCategory
    note: Optional[str] = Field(None, max_length=500)
    created_at: Optional[str] = None


class GuestDataMigrationRequest(ApiModel):
    meals: List[LocalMealRecord] = []


class MigrationItemResult(ApiModel):
    local_id: Optional[str] = None
    created_at: Optional[str] = None
    status: Literal["inserted", "skipped", "failed"]
    success: bool
    id: Optional[int] = None
    error: Optional[str] = None


class MigrationResult(ApiModel):
    migrated_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    results: List[MigrationItemResult] = []
