from fastapi import APIRouter, Depends, Request
from lunchlog.config import settings
from lunchlog.core.completion import CompletionClient
from lunchlog.core.dependencies import get_current_user, get_completion_client
from lunchlog.core.rate_limit import limiter
from lunchlog.modules.pantry.routes import get_pantry_service
from lunchlog.modules.pantry.service import PantryService
from lunchlog.modules.shopping_list.schemas import ShoppingListRequest, ShoppingList
from lunchlog.modules.shopping_list.service import ShoppingListService
from typing import Optional, Dict

router = APIRouter(prefix="/shopping-list", tags=["shopping-list"])


def get_shopping_list_service(
    completion: Optional[CompletionClient] = Depends(get_completion_client),
    pantry_service: PantryService = Depends(get_pantry_service)
) -> ShoppingListService:
    return ShoppingListService(completion, pantry_service)


@router.post("/generate-from-dinner", response_model=ShoppingList)
@limiter.limit(settings.ai_rate_limit)
def generate_from_dinner(
    request: Request,
    body: ShoppingListRequest,
    user_data: Dict = Depends(get_current_user),
    service: ShoppingListService = Depends(get_shopping_list_service)
):
    return service.generate_from_dinner(body.dish_name, body.category, user_data["id"])
