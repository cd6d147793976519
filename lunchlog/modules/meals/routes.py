from fastapi import APIRouter, Depends, Query
from lunchlog.database.supabase_client import get_supabase
from lunchlog.core.dependencies import get_current_user
from lunchlog.core.schemas import DATE_PATTERN, SuccessResponse
from lunchlog.modules.meals.schemas import MealCreate, MealCreateResponse, MealRecordResponse
from lunchlog.modules.meals.service import MealService, MAX_RECENT_LIMIT
from lunchlog.modules.migration.schemas import LocalMealRecord, MigrationResult
from lunchlog.modules.migration.service import MigrationService
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/meals", tags=["meals"])


def get_meal_service(supabase: Optional[Client] = Depends(get_supabase)) -> MealService:
    return MealService(supabase)


@router.post("", response_model=MealCreateResponse, status_code=201)
async def create_meal(
    meal_data: MealCreate,
    user_data: Dict = Depends(get_current_user),
    service: MealService = Depends(get_meal_service)
):
    """Record a lunch or dinner"""
    return MealCreateResponse(id=service.create_meal(meal_data, user_data["id"]))


@router.get("", response_model=List[MealRecordResponse])
async def get_meals_by_date(
    date: str = Query(..., pattern=DATE_PATTERN),
    user_data: Dict = Depends(get_current_user),
    service: MealService = Depends(get_meal_service)
):
    """Meals recorded on a date"""
    return service.get_meals_by_date(user_data["id"], date)


@router.get("/today-lunch", response_model=Optional[MealRecordResponse])
async def get_today_lunch(
    date: str = Query(..., pattern=DATE_PATTERN),
    user_data: Dict = Depends(get_current_user),
    service: MealService = Depends(get_meal_service)
):
    """The lunch recorded on a date, or null"""
    return service.get_today_lunch(user_data["id"], date)


@router.get("/recent", response_model=List[MealRecordResponse])
async def get_recent_meals(
    limit: int = Query(10, ge=1, le=MAX_RECENT_LIMIT),
    user_data: Dict = Depends(get_current_user),
    service: MealService = Depends(get_meal_service)
):
    """Most recent meals, newest date first"""
    return service.get_recent_meals(user_data["id"], limit)


@router.get("/range", response_model=List[MealRecordResponse])
async def get_meals_by_date_range(
    start_date: str = Query(..., alias="startDate", pattern=DATE_PATTERN),
    end_date: str = Query(..., alias="endDate", pattern=DATE_PATTERN),
    user_data: Dict = Depends(get_current_user),
    service: MealService = Depends(get_meal_service)
):
    """Meals between two dates, both inclusive"""
    return service.get_meals_by_date_range(user_data["id"], start_date, end_date)


@router.delete("/{meal_id}", response_model=SuccessResponse)
async def delete_meal(
    meal_id: int,
    user_data: Dict = Depends(get_current_user),
    service: MealService = Depends(get_meal_service)
):
    """Delete a meal record owned by the caller"""
    service.delete_meal(meal_id, user_data["id"])
    return SuccessResponse()


@router.post("/sync", response_model=MigrationResult)
async def sync_local_meals(
    meals: List[LocalMealRecord],
    user_data: Dict = Depends(get_current_user),
    service: MealService = Depends(get_meal_service)
):
    """Upload the device's guest records after login"""
    return MigrationService(service).migrate(meals, user_data["id"])
