from typing import List

from fastapi import APIRouter, Depends, Query, status

from app.core.dates import parse_day
from app.core.dependencies import get_current_user, get_meal_service, get_owned_meal
from app.models.user import User
from app.schemas.meal import MealCreate, MealDeleted, MealRead, MealUpdate
from app.services.meal_service import MealService, OwnedMeal

router = APIRouter(tags=["meals"])


@router.get("/meal-types")
async def get_meal_types():
    """Available meal types"""
    return ["breakfast", "lunch", "dinner", "snack"]


@router.get("", response_model=List[MealRead])
@router.get("/", response_model=List[MealRead], include_in_schema=False)
async def list_meals(
        current_user: User = Depends(get_current_user),
        service: MealService = Depends(get_meal_service),
):
    """All meals of the current user, newest first"""
    return await service.list(current_user.id)


@router.get("/by-date", response_model=List[MealRead])
async def list_meals_by_date(
        day: str = Query(alias="date"),
        current_user: User = Depends(get_current_user),
        service: MealService = Depends(get_meal_service),
):
    """Meals of one day in the order they were logged"""
    return await service.list_for_day(current_user.id, parse_day(day))


@router.post("", response_model=MealRead, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=MealRead, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_meal(
        meal_data: MealCreate,
        current_user: User = Depends(get_current_user),
        service: MealService = Depends(get_meal_service),
):
    """Log a meal and add it to the day's progress"""
    return await service.create(current_user.id, meal_data)


@router.get("/{meal_id}", response_model=MealRead)
async def get_meal(
        owned: OwnedMeal = Depends(get_owned_meal),
        service: MealService = Depends(get_meal_service),
):
    return await service.get(owned)


@router.put("/{meal_id}", response_model=MealRead)
@router.patch("/{meal_id}", response_model=MealRead)
async def update_meal(
        meal_data: MealUpdate,
        owned: OwnedMeal = Depends(get_owned_meal),
        service: MealService = Depends(get_meal_service),
):
    """Change some fields of a meal; the day's progress moves by the difference"""
    return await service.update(owned, meal_data)


@router.delete("/{meal_id}", response_model=MealDeleted)
async def delete_meal(
        owned: OwnedMeal = Depends(get_owned_meal),
        service: MealService = Depends(get_meal_service),
):
    await service.delete(owned)
    return MealDeleted()
