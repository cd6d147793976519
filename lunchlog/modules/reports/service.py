from lunchlog.config.recommendations_config import (
    NO_MEALS_ANALYSIS, WEEKLY_REPORT_FALLBACK_ANALYSIS, NUTRITION_ADVICE_FALLBACK
)
from lunchlog.core.completion import CompletionClient, CompletionError, json_schema_format
from lunchlog.core.enums import MealCategory, MealType, category_label, category_color
from lunchlog.modules.meals.schemas import MealRecordResponse
from lunchlog.modules.meals.service import MealService
from lunchlog.modules.reports.prompts import (
    SYSTEM_PROMPT, WEEKLY_ANALYSIS_SCHEMA, NUTRITION_ADVICE_SCHEMA,
    weekly_analysis_prompt, nutrition_advice_prompt
)
from lunchlog.modules.reports.schemas import CategoryBreakdown, WeeklyReport, WeeklyAnalysis, NutritionAdvice
from fastapi import HTTPException
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


def week_bounds(week_start_date: str) -> Tuple[str, str]:
    """(start, start + 6 days) as YYYY-MM-DD strings"""
    try:
        start = datetime.strptime(week_start_date, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="weekStartDate is not a valid date")
    end = start + timedelta(days=DAYS_PER_WEEK - 1)
    return start.isoformat(), end.isoformat()


def clamp_score(score: int) -> int:
    return max(0, min(100, score))


class ReportService:
    def __init__(self, meal_service: MealService, completion: Optional[CompletionClient]):
        self.meal_service = meal_service
        self.completion = completion

    def _complete(self, name: str, schema: Dict[str, Any], prompt: str) -> Dict[str, Any]:
        if self.completion is None:
            raise CompletionError("Completion service not available")
        return self.completion.complete_json(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format=json_schema_format(name, schema),
        )

    def get_weekly_report(self, user_id: int, week_start_date: str) -> WeeklyReport:
        start, end = week_bounds(week_start_date)
        meals = self.meal_service.get_meals_by_date_range(user_id, start, end)

        lunch_days = {m.date for m in meals if m.meal_type == MealType.LUNCH}
        dinner_days = {m.date for m in meals if m.meal_type == MealType.DINNER}
        completed_days = len(lunch_days & dinner_days)
        completion_rate = round(completed_days / DAYS_PER_WEEK * 100)

        category_stats = {category.value: 0 for category in MealCategory}
        for meal in meals:
            category_stats[meal.category.value] += 1

        analysis, score = self._weekly_analysis(meals, completion_rate)

        return WeeklyReport(
            week_start_date=start,
            week_end_date=end,
            total_meals=len(meals),
            lunches=sum(1 for m in meals if m.meal_type == MealType.LUNCH),
            dinners=sum(1 for m in meals if m.meal_type == MealType.DINNER),
            completed_days=completed_days,
            completion_rate=completion_rate,
            category_stats=category_stats,
            category_breakdown=[
                CategoryBreakdown(
                    category=category,
                    label=category_label(category),
                    color=category_color(category),
                    count=category_stats[category.value],
                )
                for category in MealCategory
            ],
            analysis=analysis,
            score=score,
        )

    def _weekly_analysis(self, meals: List[MealRecordResponse], completion_rate: int) -> Tuple[str, int]:
        if not meals:
            return NO_MEALS_ANALYSIS, 0
        try:
            content = self._complete(
                "weekly_analysis", WEEKLY_ANALYSIS_SCHEMA, weekly_analysis_prompt(meals, completion_rate)
            )
            parsed = WeeklyAnalysis(**content)
            return parsed.analysis, clamp_score(parsed.score)
        except Exception as e:
            logger.error(f"Failed to analyze weekly report, using fallback: {e}")
            return WEEKLY_REPORT_FALLBACK_ANALYSIS, completion_rate

    def get_nutrition_advice(self, user_id: int, week_start_date: str) -> NutritionAdvice:
        start, end = week_bounds(week_start_date)
        meals = self.meal_service.get_meals_by_date_range(user_id, start, end)
        if not meals:
            return NutritionAdvice(analysis=NO_MEALS_ANALYSIS, recommendations=[], nutrition_score=0)

        try:
            content = self._complete(
                "nutrition_advice", NUTRITION_ADVICE_SCHEMA, nutrition_advice_prompt(meals)
            )
            if isinstance(content.get("nutritionScore"), int):
                content["nutritionScore"] = clamp_score(content["nutritionScore"])
            return NutritionAdvice(**content)
        except Exception as e:
            logger.error(f"Failed to get nutrition advice, using fallback: {e}")
            return NutritionAdvice(**NUTRITION_ADVICE_FALLBACK)
