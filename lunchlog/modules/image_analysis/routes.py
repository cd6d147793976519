from fastapi import APIRouter, Depends, Request
from lunchlog.config import settings
from lunchlog.core.completion import CompletionClient
from lunchlog.core.dependencies import get_current_user, get_completion_client, get_object_storage
from lunchlog.core.rate_limit import limiter
from lunchlog.modules.image_analysis.schemas import FoodImageRequest, FoodAnalysisResponse
from lunchlog.modules.image_analysis.service import ImageAnalysisService
from typing import Optional, Dict

router = APIRouter(prefix="/image-analysis", tags=["image-analysis"])


def get_image_analysis_service(
    storage=Depends(get_object_storage),
    completion: Optional[CompletionClient] = Depends(get_completion_client)
) -> ImageAnalysisService:
    return ImageAnalysisService(storage, completion)


@router.post("/analyze-food", response_model=FoodAnalysisResponse)
@limiter.limit(settings.ai_rate_limit)
def analyze_food(
    request: Request,
    body: FoodImageRequest,
    user_data: Dict = Depends(get_current_user),
    service: ImageAnalysisService = Depends(get_image_analysis_service)
):
    """Upload a meal photo and get a suggested dish name and category"""
    return service.analyze_food(body.image_base64, body.mime_type, user_data["id"])
