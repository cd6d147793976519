from fastapi import APIRouter, Depends, Query, Request
from lunchlog.config import settings
from lunchlog.core.completion import CompletionClient
from lunchlog.core.dependencies import get_current_user, get_completion_client
from lunchlog.core.rate_limit import limiter
from lunchlog.core.schemas import DATE_PATTERN
from lunchlog.modules.meals.routes import get_meal_service
from lunchlog.modules.meals.service import MealService
from lunchlog.modules.reports.schemas import WeeklyReport, NutritionAdvice
from lunchlog.modules.reports.service import ReportService
from typing import Optional, Dict

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_service(
    meal_service: MealService = Depends(get_meal_service),
    completion: Optional[CompletionClient] = Depends(get_completion_client)
) -> ReportService:
    return ReportService(meal_service, completion)


@router.get("/weekly", response_model=WeeklyReport)
@limiter.limit(settings.ai_rate_limit)
def get_weekly_report(
    request: Request,
    week_start_date: str = Query(..., alias="weekStartDate", pattern=DATE_PATTERN),
    user_data: Dict = Depends(get_current_user),
    service: ReportService = Depends(get_report_service)
):
    """Seven-day summary starting at weekStartDate"""
    return service.get_weekly_report(user_data["id"], week_start_date)


@router.get("/nutrition-advice", response_model=NutritionAdvice)
@limiter.limit(settings.ai_rate_limit)
def get_nutrition_advice(
    request: Request,
    week_start_date: str = Query(..., alias="weekStartDate", pattern=DATE_PATTERN),
    user_data: Dict = Depends(get_current_user),
    service: ReportService = Depends(get_report_service)
):
    return service.get_nutrition_advice(user_data["id"], week_start_date)
