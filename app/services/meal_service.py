"""
Meal ledger.

Every mutation writes the meal and its day's DailyProgress in one transaction:
either both are committed or neither is.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AggregateInconsistencyError
from app.models.meal import Meal, Macros
from app.repositories.meal_repository import MealRepository
from app.schemas.meal import MealCreate, MealUpdate
from app.services.progress_service import ProgressService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnedMeal:
    """Proof that ``meal`` belongs to ``user_id``; only get_owned_meal hands these out."""

    user_id: int
    meal: Meal


class MealService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.meals = MealRepository(db)
        self.progress = ProgressService(db)

    async def list(self, user_id: int) -> List[Meal]:
        return await self.meals.list_for_user(user_id)

    async def list_for_day(self, user_id: int, day: date) -> List[Meal]:
        return await self.meals.list_for_day(user_id, day)

    async def resolve_owned(self, user_id: int, meal_id: int) -> Optional[OwnedMeal]:
        meal = await self.meals.get_owned(user_id, meal_id)
        if meal is None:
            return None
        return OwnedMeal(user_id=user_id, meal=meal)

    async def create(self, user_id: int, data: MealCreate) -> Meal:
        meal = Meal(user_id=user_id, **data.model_dump())
        await self.meals.add(meal)

        try:
            await self.progress.upsert(user_id, meal.date, Macros.of(meal), meal_id=meal.id)
        except SQLAlchemyError as e:
            await self._abort("create", user_id, meal.date, e)

        await self.db.commit()
        await self.db.refresh(meal)
        logger.info("User %s logged meal %s on %s", user_id, meal.id, meal.date)
        return meal

    async def get(self, owned: OwnedMeal) -> Meal:
        return owned.meal

    async def update(self, owned: OwnedMeal, data: MealUpdate) -> Meal:
        meal = owned.meal
        old_day = meal.date
        old_macros = Macros.of(meal)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(meal, field, value)
        await self.db.flush()

        new_macros = Macros.of(meal)
        try:
            if meal.date == old_day:
                await self.progress.apply_delta(owned.user_id, old_day, new_macros - old_macros)
            else:
                await self.progress.remove_meal_ref(owned.user_id, old_day, meal.id, old_macros)
                await self.progress.upsert(owned.user_id, meal.date, new_macros, meal_id=meal.id)
        except SQLAlchemyError as e:
            await self._abort("update", owned.user_id, old_day, e)

        await self.db.commit()
        await self.db.refresh(meal)
        return meal

    async def delete(self, owned: OwnedMeal) -> None:
        meal = owned.meal
        meal_id, day = meal.id, meal.date
        try:
            await self.progress.remove_meal_ref(owned.user_id, day, meal_id, Macros.of(meal))
        except SQLAlchemyError as e:
            await self._abort("delete", owned.user_id, day, e)

        await self.meals.delete(meal)
        await self.db.commit()
        logger.info("User %s deleted meal %s", owned.user_id, meal_id)

    async def _abort(self, operation: str, user_id: int, day: date, error: Exception):
        await self.db.rollback()
        logger.error(
            "aggregate inconsistency: meal %s for user %s on %s rolled back: %s",
            operation, user_id, day, error,
        )
        raise AggregateInconsistencyError() from error
