from fastapi import APIRouter, Depends
from lunchlog.database.supabase_client import get_supabase
from lunchlog.core.dependencies import get_current_user
from lunchlog.core.schemas import IdResponse, SuccessResponse
from lunchlog.modules.favorites.schemas import FavoriteCreate, FavoriteResponse, FavoriteUse, FavoriteUseResponse
from lunchlog.modules.favorites.service import FavoriteService
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/favorites", tags=["favorites"])


def get_favorite_service(supabase: Optional[Client] = Depends(get_supabase)) -> FavoriteService:
    return FavoriteService(supabase)


@router.post("", response_model=IdResponse, status_code=201)
async def create_favorite(
    favorite_data: FavoriteCreate,
    user_data: Dict = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    return IdResponse(id=service.create_favorite(favorite_data, user_data["id"]))


@router.get("", response_model=List[FavoriteResponse])
async def list_favorites(
    user_data: Dict = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Caller's favorites, most used first"""
    return service.list_favorites(user_data["id"])


@router.post("/{favorite_id}/use", response_model=FavoriteUseResponse, status_code=201)
async def use_favorite(
    favorite_id: int,
    use_data: FavoriteUse,
    user_data: Dict = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Record a meal from a favorite"""
    return service.use_favorite(favorite_id, use_data, user_data["id"])


@router.delete("/{favorite_id}", response_model=SuccessResponse)
async def delete_favorite(
    favorite_id: int,
    user_data: Dict = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    service.delete_favorite(favorite_id, user_data["id"])
    return SuccessResponse()
