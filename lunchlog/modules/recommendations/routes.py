from fastapi import APIRouter, Depends, Request
from lunchlog.config import settings
from lunchlog.database.supabase_client import get_supabase
from lunchlog.core.completion import CompletionClient
from lunchlog.core.dependencies import (
    get_current_user, check_group_member, get_completion_client, get_fallback_recommendations
)
from lunchlog.core.rate_limit import limiter
from lunchlog.modules.groups.routes import get_group_service
from lunchlog.modules.groups.service import GroupService
from lunchlog.modules.recommendations.schemas import (
    DinnerRecommendationRequest, GroupDinnerRecommendationRequest,
    Recommendation, GroupDinnerRecommendationResponse
)
from lunchlog.modules.recommendations.service import RecommendationService
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


def get_recommendation_service(
    completion: Optional[CompletionClient] = Depends(get_completion_client),
    fallback: List[Dict[str, str]] = Depends(get_fallback_recommendations)
) -> RecommendationService:
    return RecommendationService(completion, fallback)


@router.post("/dinner", response_model=List[Recommendation])
@limiter.limit(settings.ai_rate_limit)
def get_dinner_recommendations(
    request: Request,
    body: DinnerRecommendationRequest,
    user_data: Dict = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Three dinner ideas based on today's lunch"""
    return service.get_dinner_recommendations(body.lunch_dish_name, body.lunch_category)


@router.post("/group-dinner", response_model=GroupDinnerRecommendationResponse)
@limiter.limit(settings.ai_rate_limit)
def get_group_dinner_recommendations(
    request: Request,
    body: GroupDinnerRecommendationRequest,
    user_data: Dict = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service),
    group_service: GroupService = Depends(get_group_service),
    supabase: Optional[Client] = Depends(get_supabase)
):
    """Three dinner ideas based on every group member's lunch (only if user is a member)"""
    check_group_member(body.group_id, user_data, supabase)
    meals = group_service.get_group_meals_for_date(body.group_id, body.date)
    return service.get_group_dinner_recommendations(meals)
