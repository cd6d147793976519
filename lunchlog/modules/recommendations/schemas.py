from pydantic import Field
from typing import List, Optional

from lunchlog.core.enums import MealCategory
from lunchlog.core.schemas import ApiModel, DATE_PATTERN


class DinnerRecommendationRequest(ApiModel):
    lunch_dish_name: str = Field(..., min_length=1, max_length=255)
    lunch_category: MealCategory


class GroupDinnerRecommendationRequest(ApiModel):
    group_id: int
    date: str = Field(..., pattern=DATE_PATTERN)


class Recommendation(ApiModel):
    name: str = Field(..., min_length=1)
    category: MealCategory
    reason: str


class RecommendationList(ApiModel):
    """Shape of the completion service's JSON answer"""
    recommendations: List[Recommendation]


class MemberLunch(ApiModel):
    name: Optional[str] = None
    dish: str
    category: MealCategory


class GroupDinnerRecommendationResponse(ApiModel):
    recommendations: List[Recommendation]
    member_lunches: List[MemberLunch] = []
