from fastapi import APIRouter, Depends
from lunchlog.core.dependencies import get_current_user
from lunchlog.modules.meals.routes import get_meal_service
from lunchlog.modules.meals.service import MealService
from lunchlog.modules.migration.schemas import GuestDataMigrationRequest, MigrationResult
from lunchlog.modules.migration.service import MigrationService
from typing import Dict

router = APIRouter(prefix="/migration", tags=["migration"])


def get_migration_service(meal_service: MealService = Depends(get_meal_service)) -> MigrationService:
    return MigrationService(meal_service)


@router.post("/guest-data", response_model=MigrationResult)
async def migrate_guest_data(
    request: GuestDataMigrationRequest,
    user_data: Dict = Depends(get_current_user),
    service: MigrationService = Depends(get_migration_service)
):
    """Move guest records into the account, skipping dates/meal types already recorded"""
    return service.migrate(request.meals, user_data["id"])
