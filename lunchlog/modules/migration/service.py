from fastapi import HTTPException
from lunchlog.modules.meals.schemas import MealCreate
from lunchlog.modules.meals.service import MealService
from lunchlog.modules.migration.schemas import LocalMealRecord, MigrationItemResult, MigrationResult
from typing import List
import logging

logger = logging.getLogger(__name__)


class MigrationService:
    """
    Moves guest (device-local) meal records into the user's account.

    Records are processed in order and independently: a record is skipped when
    the user already has a meal for the same date and meal type (including one
    inserted earlier in the same batch), inserted otherwise, and a failure on
    one record never aborts the rest.
    """

    def __init__(self, meal_service: MealService):
        self.meal_service = meal_service

    def migrate(self, records: List[LocalMealRecord], user_id: int) -> MigrationResult:
        result = MigrationResult()
        if not records:
            return result
        if self.meal_service.supabase is None:
            raise HTTPException(status_code=503, detail="Database not available")

        for record in records:
            item = self._migrate_one(record, user_id)
            result.results.append(item)
            if item.status == "inserted":
                result.migrated_count += 1
            elif item.status == "skipped":
                result.skipped_count += 1
            else:
                result.failed_count += 1

        logger.info(
            f"Guest data migration for user {user_id}: {result.migrated_count} inserted, "
            f"{result.skipped_count} skipped, {result.failed_count} failed"
        )
        return result

    def _migrate_one(self, record: LocalMealRecord, user_id: int) -> MigrationItemResult:
        try:
            if self.meal_service.meal_exists(user_id, record.date, record.meal_type.value):
                return MigrationItemResult(
                    local_id=record.id,
                    created_at=record.created_at,
                    status="skipped",
                    success=True,
                )
            meal_id = self.meal_service.create_meal(
                MealCreate(
                    date=record.date,
                    meal_type=record.meal_type,
                    dish_name=record.dish_name,
                    category=record.category,
                    note=record.note,
                ),
                user_id,
            )
            return MigrationItemResult(
                local_id=record.id,
                created_at=record.created_at,
                status="inserted",
                success=True,
                id=meal_id,
            )
        except Exception as e:
            error = e.detail if isinstance(e, HTTPException) else str(e)
            logger.error(f"Failed to migrate local meal {record.id} ({record.date} {record.meal_type.value}): {error}")
            return MigrationItemResult(
                local_id=record.id,
                created_at=record.created_at,
                status="failed",
                success=False,
                error=str(error),
            )
