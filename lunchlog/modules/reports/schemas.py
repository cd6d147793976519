from pydantic import Field
from typing import Dict, List

from lunchlog.core.enums import MealCategory
from lunchlog.core.schemas import ApiModel


class CategoryBreakdown(ApiModel):
    category: MealCategory
    label: str
    color: str
    count: int


class WeeklyReport(ApiModel):
    week_start_date: str
    week_end_date: str
    total_meals: int
    lunches: int
    dinners: int
    completed_days: int
    completion_rate: int
    category_stats: Dict[str, int]
    category_breakdown: List[CategoryBreakdown]
    analysis: str
    score: int = Field(..., ge=0, le=100)


class WeeklyAnalysis(ApiModel):
    analysis: str
    score: int


class NutritionAdvice(ApiModel):
    analysis: str
    recommendations: List[str] = []
    nutrition_score: int = Field(..., ge=0, le=100)
