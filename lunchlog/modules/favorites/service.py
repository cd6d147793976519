from supabase import Client
from lunchlog.modules.favorites.schemas import FavoriteCreate, FavoriteResponse, FavoriteUse, FavoriteUseResponse
from lunchlog.modules.meals.schemas import MealCreate
from lunchlog.modules.meals.service import MealService
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

_USAGE_UPDATE_ATTEMPTS = 3


class FavoriteService:
    def __init__(self, supabase: Optional[Client]):
        self.supabase = supabase

    def _require_db(self) -> Client:
        if self.supabase is None:
            raise HTTPException(status_code=503, detail="Database not available")
        return self.supabase

    def create_favorite(self, favorite_data: FavoriteCreate, user_id: int) -> int:
        supabase = self._require_db()
        try:
            result = supabase.table("favorite_meals").insert({
                "user_id": user_id,
                "dish_name": favorite_data.dish_name,
                "category": favorite_data.category.value,
                "note": favorite_data.note or None,
                "image_url": str(favorite_data.image_url) if favorite_data.image_url else None,
                "usage_count": 0,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create favorite")

            return int(result.data[0]["id"])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_favorites(self, user_id: int) -> List[FavoriteResponse]:
        """Most used first"""
        if self.supabase is None:
            logger.warning("Cannot list favorites: database not available")
            return []
        try:
            result = self.supabase.table("favorite_meals")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("usage_count", desc=True)\
                .order("created_at", desc=True)\
                .execute()
            return [FavoriteResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing favorites: {e}")
            return []

    def get_favorite(self, favorite_id: int, user_id: int) -> FavoriteResponse:
        supabase = self._require_db()
        result = supabase.table("favorite_meals")\
            .select("*")\
            .eq("id", favorite_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Favorite not found")
        return FavoriteResponse(**result.data[0])

    def _increment_usage(self, favorite: FavoriteResponse, user_id: int) -> int:
        """Compare-and-set on usage_count; re-read and retry when another use got there first."""
        supabase = self._require_db()
        for _ in range(_USAGE_UPDATE_ATTEMPTS):
            usage_count = favorite.usage_count + 1
            result = supabase.table("favorite_meals")\
                .update({
                    "usage_count": usage_count,
                    "last_used_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", favorite.id)\
                .eq("user_id", user_id)\
                .eq("usage_count", favorite.usage_count)\
                .execute()
            if result.data:
                return usage_count
            favorite = self.get_favorite(favorite.id, user_id)
        raise HTTPException(status_code=500, detail="Failed to update favorite usage")

    def use_favorite(self, favorite_id: int, use_data: FavoriteUse, user_id: int) -> FavoriteUseResponse:
        """Record a meal from a favorite and bump its usage counter, as one unit"""
        supabase = self._require_db()
        try:
            favorite = self.get_favorite(favorite_id, user_id)
            meal_service = MealService(supabase)
            meal_id = meal_service.create_meal(
                MealCreate(
                    date=use_data.date,
                    meal_type=use_data.meal_type,
                    dish_name=favorite.dish_name,
                    category=favorite.category,
                    note=favorite.note,
                    image_url=favorite.image_url,
                    group_id=use_data.group_id,
                    is_favorite=True,
                ),
                user_id,
            )

            try:
                usage_count = self._increment_usage(favorite, user_id)
            except Exception:
                logger.error(f"Usage update failed for favorite {favorite_id}; removing meal {meal_id}")
                meal_service.delete_meal(meal_id, user_id)
                raise

            return FavoriteUseResponse(meal_id=meal_id, usage_count=usage_count)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_favorite(self, favorite_id: int, user_id: int) -> None:
        supabase = self._require_db()
        try:
            supabase.table("favorite_meals")\
                .delete()\
                .eq("id", favorite_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
