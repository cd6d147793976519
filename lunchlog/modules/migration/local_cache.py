"""
Device-side guest meal cache and the login-time sync step.

Guests record meals locally; the whole list is kept as one JSON array under a
single storage key. When the user logs in, the list is sent to the server
once and then cleared.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, MutableMapping, Optional

from pydantic import TypeAdapter, ValidationError

from lunchlog.core.enums import MealCategory, MealType
from lunchlog.modules.migration.schemas import LocalMealRecord, MigrationResult

logger = logging.getLogger(__name__)

STORAGE_KEY = "local_meal_records"

_records_adapter = TypeAdapter(List[LocalMealRecord])


class LocalMealCache:
    def __init__(
        self,
        storage: MutableMapping[str, str],
        key: str = STORAGE_KEY,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.storage = storage
        self.key = key
        self.clock = clock

    def load(self) -> List[LocalMealRecord]:
        data = self.storage.get(self.key)
        if not data:
            return []
        try:
            return _records_adapter.validate_json(data)
        except ValidationError as e:
            logger.error(f"Failed to load local meals: {e}")
            return []

    def _save(self, meals: List[LocalMealRecord]) -> None:
        self.storage[self.key] = _records_adapter.dump_json(meals, by_alias=True, exclude_none=True).decode()

    def add_meal(
        self,
        date: str,
        meal_type: MealType,
        dish_name: str,
        category: MealCategory,
        note: Optional[str] = None,
    ) -> LocalMealRecord:
        now = self.clock()
        meals = self.load()
        meal = LocalMealRecord(
            id=str(int(now.timestamp() * 1000)),
            date=date,
            meal_type=meal_type,
            dish_name=dish_name,
            category=category,
            note=note,
            created_at=now.isoformat(),
        )
        self._save([meal] + meals)
        return meal

    def get_meals_by_date(self, date: str) -> List[LocalMealRecord]:
        return [m for m in self.load() if m.date == date]

    def _find(self, date: str, meal_type: MealType) -> Optional[LocalMealRecord]:
        return next((m for m in self.load() if m.date == date and m.meal_type == meal_type), None)

    def get_today_lunch(self, date: str) -> Optional[LocalMealRecord]:
        return self._find(date, MealType.LUNCH)

    def get_today_dinner(self, date: str) -> Optional[LocalMealRecord]:
        return self._find(date, MealType.DINNER)

    def get_recent_meals(self, limit: int = 10) -> List[LocalMealRecord]:
        return sorted(self.load(), key=lambda m: m.date, reverse=True)[:limit]

    def get_meals_by_date_range(self, start_date: str, end_date: str) -> List[LocalMealRecord]:
        return [m for m in self.load() if start_date <= m.date <= end_date]

    def delete_meal(self, meal_id: str) -> None:
        self._save([m for m in self.load() if m.id != meal_id])

    def clear(self) -> None:
        self.storage.pop(self.key, None)


def sync_local_meals_on_login(
    cache: LocalMealCache,
    sync: Callable[[List[LocalMealRecord]], MigrationResult],
) -> Optional[MigrationResult]:
    """
    Send cached guest meals to the server after login.

    The cache is cleared once the call returns, even when individual records
    failed; those are only visible in the returned result. If the call itself
    raises, the cache is kept and login carries on.
    """
    meals = cache.load()
    if not meals:
        return None
    logger.info(f"Syncing {len(meals)} local meal(s) to server")
    try:
        result = sync(meals)
    except Exception as e:
        logger.error(f"Failed to sync local meals: {e}")
        return None
    cache.clear()
    if result.failed_count:
        logger.warning(f"{result.failed_count} local meal(s) failed to sync and were dropped from the cache")
    return result
