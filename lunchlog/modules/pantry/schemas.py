from pydantic import Field
from typing import Optional
from datetime import datetime

from lunchlog.core.enums import PantryCategory
from lunchlog.core.schemas import ApiModel, DATE_PATTERN


class PantryItemCreate(ApiModel):
    ingredient_name: str = Field(..., min_length=1, max_length=255)
    quantity: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=20)
    category: PantryCategory
    expiry_date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    low_stock_alert: bool = False
    group_id: Optional[int] = None


class PantryItemUpdate(ApiModel):
    ingredient_name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[str] = Field(None, max_length=50)
    unit: Optional[str] = Field(None, max_length=20)
    category: Optional[PantryCategory] = None
    expiry_date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    low_stock_alert: Optional[bool] = None


class PantryItemResponse(ApiModel):
    id: int
    user_id: int
    group_id: Optional[int] = None
    ingredient_name: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    category: PantryCategory
    expiry_date: Optional[str] = None
    low_stock_alert: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
