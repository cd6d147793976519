from supabase import Client
from lunchlog.core.enums import PantryCategory
from lunchlog.modules.pantry.schemas import PantryItemCreate, PantryItemUpdate, PantryItemResponse
from typing import List, Optional, Set
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def normalize_ingredient_name(name: str) -> str:
    return "".join((name or "").split()).casefold()


class PantryService:
    def __init__(self, supabase: Optional[Client]):
        self.supabase = supabase

    def _require_db(self) -> Client:
        if self.supabase is None:
            raise HTTPException(status_code=503, detail="Database not available")
        return self.supabase

    def create_item(self, item_data: PantryItemCreate, user_id: int) -> int:
        supabase = self._require_db()
        try:
            result = supabase.table("pantry_inventory").insert({
                "user_id": user_id,
                "group_id": item_data.group_id,
                "ingredient_name": item_data.ingredient_name,
                "quantity": item_data.quantity,
                "unit": item_data.unit,
                "category": item_data.category.value,
                "expiry_date": item_data.expiry_date,
                "low_stock_alert": item_data.low_stock_alert,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create pantry item")

            return int(result.data[0]["id"])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_items(self, user_id: int, group_id: Optional[int] = None) -> List[PantryItemResponse]:
        """Caller's own items, or a group's shared items when group_id is given"""
        if self.supabase is None:
            logger.warning("Cannot list pantry items: database not available")
            return []
        try:
            query = self.supabase.table("pantry_inventory").select("*")
            if group_id is not None:
                query = query.eq("group_id", group_id)
            else:
                query = query.eq("user_id", user_id)
            result = query.order("created_at", desc=True).execute()
            return [PantryItemResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing pantry items: {e}")
            return []

    def get_ingredient_names(self, user_id: int) -> Set[str]:
        return {normalize_ingredient_name(item.ingredient_name) for item in self.list_items(user_id)}

    def update_item(self, item_id: int, item_data: PantryItemUpdate, user_id: int) -> None:
        supabase = self._require_db()
        update_data = item_data.model_dump(exclude_unset=True)
        # Columns that are NOT NULL can't be cleared
        for key in ("ingredient_name", "category", "low_stock_alert"):
            if key in update_data and update_data[key] is None:
                del update_data[key]
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        if isinstance(update_data.get("category"), PantryCategory):
            update_data["category"] = update_data["category"].value
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            result = supabase.table("pantry_inventory")\
                .update(update_data)\
                .eq("id", item_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Pantry item not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
