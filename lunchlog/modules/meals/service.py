from supabase import Client
from lunchlog.modules.meals.schemas import MealCreate, MealRecordResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MAX_RECENT_LIMIT = 50


class MealService:
    def __init__(self, supabase: Optional[Client]):
        self.supabase = supabase

    def _require_db(self) -> Client:
        if self.supabase is None:
            raise HTTPException(status_code=503, detail="Database not available")
        return self.supabase

    def create_meal(self, meal_data: MealCreate, user_id: int) -> int:
        """Insert a meal record and return its id"""
        supabase = self._require_db()
        try:
            result = supabase.table("meal_records").insert({
                "user_id": user_id,
                "group_id": meal_data.group_id,
                "date": meal_data.date,
                "meal_type": meal_data.meal_type.value,
                "dish_name": meal_data.dish_name,
                "category": meal_data.category.value,
                "note": meal_data.note or None,
                "image_url": str(meal_data.image_url) if meal_data.image_url else None,
                "is_favorite": meal_data.is_favorite,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create meal record")

            return int(result.data[0]["id"])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to create meal record: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def _select(self, build, what: str) -> List[Dict[str, Any]]:
        """Run a read query; degrade to [] when the store is unavailable"""
        if self.supabase is None:
            logger.warning(f"Cannot get {what}: database not available")
            return []
        try:
            result = build(self.supabase.table("meal_records").select("*")).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error getting {what}: {e}")
            return []

    def get_meals_by_date(self, user_id: int, date: str) -> List[MealRecordResponse]:
        rows = self._select(
            lambda q: q.eq("user_id", user_id).eq("date", date),
            "meals by date",
        )
        return [MealRecordResponse(**row) for row in rows]

    def get_meals_by_date_range(self, user_id: int, start_date: str, end_date: str) -> List[MealRecordResponse]:
        """Both bounds inclusive, newest date first"""
        rows = self._select(
            lambda q: q.eq("user_id", user_id)
                       .gte("date", start_date)
                       .lte("date", end_date)
                       .order("date", desc=True),
            "meals by date range",
        )
        return [MealRecordResponse(**row) for row in rows]

    def get_recent_meals(self, user_id: int, limit: int = 10) -> List[MealRecordResponse]:
        limit = max(1, min(limit, MAX_RECENT_LIMIT))
        rows = self._select(
            lambda q: q.eq("user_id", user_id)
                       .order("date", desc=True)
                       .order("created_at", desc=True)
                       .limit(limit),
            "recent meals",
        )
        return [MealRecordResponse(**row) for row in rows]

    def find_meal(self, user_id: int, date: str, meal_type: str) -> Optional[MealRecordResponse]:
        rows = self._select(
            lambda q: q.eq("user_id", user_id)
                       .eq("date", date)
                       .eq("meal_type", meal_type)
                       .limit(1),
            f"{meal_type} for {date}",
        )
        return MealRecordResponse(**rows[0]) if rows else None

    def get_today_lunch(self, user_id: int, date: str) -> Optional[MealRecordResponse]:
        return self.find_meal(user_id, date, "lunch")

    def meal_exists(self, user_id: int, date: str, meal_type: str) -> bool:
        """Strict existence check: store errors propagate instead of reading as 'absent'"""
        supabase = self._require_db()
        result = supabase.table("meal_records")\
            .select("id")\
            .eq("user_id", user_id)\
            .eq("date", date)\
            .eq("meal_type", meal_type)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def delete_meal(self, meal_id: int, user_id: int) -> None:
        """Delete only if owned by user_id; otherwise a silent no-op"""
        supabase = self._require_db()
        try:
            supabase.table("meal_records")\
                .delete()\
                .eq("id", meal_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to delete meal record {meal_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
