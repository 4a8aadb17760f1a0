from datetime import date
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.meal import Meal, Macros, to_cents


class MealRepository:
    """Data access for the meal ledger.

    Methods only stage changes (add/flush); committing is left to the service
    so a meal write and its aggregate update share one transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: int) -> List[Meal]:
        result = await self.db.execute(
            select(Meal)
            .where(Meal.user_id == user_id)
            .order_by(Meal.date.desc(), Meal.id.desc())
        )
        return list(result.scalars().all())

    async def list_for_day(self, user_id: int, day: date) -> List[Meal]:
        result = await self.db.execute(
            select(Meal)
            .where(Meal.user_id == user_id, Meal.date == day)
            .order_by(Meal.created_at.asc(), Meal.id.asc())
        )
        return list(result.scalars().all())

    async def get_owned(self, user_id: int, meal_id: int) -> Optional[Meal]:
        """Meal by id, but only when it belongs to user_id."""
        result = await self.db.execute(
            select(Meal).where(Meal.id == meal_id, Meal.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def add(self, meal: Meal) -> Meal:
        self.db.add(meal)
        await self.db.flush()
        return meal

    async def delete(self, meal: Meal) -> None:
        await self.db.delete(meal)
        await self.db.flush()

    async def sum_for_day(self, user_id: int, day: date):
        """(Macros, [meal ids]) summed straight from the ledger."""
        totals = await self.db.execute(
            select(
                func.coalesce(func.sum(Meal.calories), 0),
                func.coalesce(func.sum(Meal.protein), 0),
                func.coalesce(func.sum(Meal.carbs), 0),
                func.coalesce(func.sum(Meal.fat), 0),
            ).where(Meal.user_id == user_id, Meal.date == day)
        )
        sums = Macros(*(to_cents(value) for value in totals.one()))
        ids = await self.db.execute(
            select(Meal.id).where(Meal.user_id == user_id, Meal.date == day).order_by(Meal.id)
        )
        return sums, list(ids.scalars().all())

    async def days_with_meals(self, user_id: Optional[int] = None):
        """Distinct (user_id, date) pairs present in the ledger."""
        stmt = select(Meal.user_id, Meal.date).distinct()
        if user_id is not None:
            stmt = stmt.where(Meal.user_id == user_id)
        result = await self.db.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]
