from typing import List

from lunchlog.core.enums import MealType
from lunchlog.core.prompts import describe_dish
from lunchlog.modules.meals.schemas import MealRecordResponse

SYSTEM_PROMPT = "あなたは栄養士です。必ずJSON形式で回答してください。"

WEEKLY_ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "analysis": {"type": "string"},
        "score": {"type": "integer"},
    },
    "required": ["analysis", "score"],
    "additionalProperties": False,
}

NUTRITION_ADVICE_SCHEMA = {
    "type": "object",
    "properties": {
        "analysis": {"type": "string"},
        "recommendations": {"type": "array", "items": {"type": "string"}},
        "nutritionScore": {"type": "integer"},
    },
    "required": ["analysis", "recommendations", "nutritionScore"],
    "additionalProperties": False,
}


def _meal_lines(meals: List[MealRecordResponse]) -> str:
    # Oldest first reads naturally as a diary
    ordered = sorted(meals, key=lambda m: (m.date, m.meal_type != MealType.LUNCH))
    return "\n".join(
        f"- {meal.date} {'昼' if meal.meal_type == MealType.LUNCH else '夜'}: {describe_dish(meal.dish_name, meal.category)}"
        for meal in ordered
    )


def weekly_analysis_prompt(meals: List[MealRecordResponse], completion_rate: int) -> str:
    return f"""以下は1週間分の食事記録です（記録達成率 {completion_rate}%）。

{_meal_lines(meals)}

食事のバランスと記録の習慣について100文字程度で講評し、0〜100の点数をつけてください。
必ず以下のJSON形式で回答してください:
{{"analysis": "講評", "score": 0}}"""


def nutrition_advice_prompt(meals: List[MealRecordResponse]) -> str:
    return f"""以下は1週間分の食事記録です。

{_meal_lines(meals)}

栄養バランスを分析し、改善のための具体的なアドバイスを2〜3個挙げ、0〜100の栄養スコアをつけてください。
必ず以下のJSON形式で回答してください:
{{"analysis": "分析", "recommendations": ["アドバイス"], "nutritionScore": 0}}"""
