from lunchlog.core.completion import CompletionClient, CompletionError, json_schema_format
from lunchlog.core.enums import MealCategory, MealType
from lunchlog.modules.groups.schemas import GroupMealResponse
from lunchlog.modules.recommendations.prompts import (
    SYSTEM_PROMPT, RESPONSE_SCHEMA, dinner_prompt, group_dinner_prompt
)
from lunchlog.modules.recommendations.schemas import (
    Recommendation, RecommendationList, MemberLunch, GroupDinnerRecommendationResponse
)
from pydantic import ValidationError
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class RecommendationService:
    """Dinner suggestions from the completion service; never fails, falls back to a fixed set"""

    def __init__(self, completion: Optional[CompletionClient], fallback: List[Dict[str, str]]):
        self.completion = completion
        self.fallback = [Recommendation(**item) for item in fallback]

    @property
    def count(self) -> int:
        return len(self.fallback)

    def _request(self, prompt: str) -> List[Recommendation]:
        if self.completion is None:
            raise CompletionError("Completion service not available")
        content = self.completion.complete_json(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format=json_schema_format("dinner_recommendations", RESPONSE_SCHEMA),
        )
        try:
            parsed = RecommendationList(**content)
        except ValidationError as e:
            raise CompletionError(f"Unexpected recommendation shape: {e}") from e
        if len(parsed.recommendations) < self.count:
            raise CompletionError(
                f"Expected {self.count} recommendations, got {len(parsed.recommendations)}"
            )
        return parsed.recommendations[:self.count]

    def get_dinner_recommendations(self, lunch_dish_name: str, lunch_category: MealCategory) -> List[Recommendation]:
        try:
            return self._request(dinner_prompt(lunch_dish_name, lunch_category, self.count))
        except Exception as e:
            logger.error(f"Failed to get recommendations, using fallback: {e}")
            return list(self.fallback)

    def get_group_dinner_recommendations(self, meals: List[GroupMealResponse]) -> GroupDinnerRecommendationResponse:
        lunches = [m for m in meals if m.meal_type == MealType.LUNCH]
        if not lunches:
            return GroupDinnerRecommendationResponse(recommendations=list(self.fallback), member_lunches=[])

        member_lunches = [MemberLunch(name=l.user_name, dish=l.dish_name, category=l.category) for l in lunches]
        try:
            recommendations = self._request(group_dinner_prompt(lunches, self.count))
        except Exception as e:
            logger.error(f"Failed to get group recommendations, using fallback: {e}")
            recommendations = list(self.fallback)
        return GroupDinnerRecommendationResponse(recommendations=recommendations, member_lunches=member_lunches)
