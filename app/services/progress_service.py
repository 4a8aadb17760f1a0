"""
Daily progress maintenance.

A DailyProgress row is a materialised view over the meals table: for every
(user, day) its totals must equal the sum of that day's meal macros. Meal
writes keep it current by applying deltas; ``recompute`` rebuilds a day from
the ledger when a delta was lost.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.meal import Macros, to_cents
from app.models.progress import DailyProgress
from app.repositories.meal_repository import MealRepository
from app.repositories.progress_repository import ProgressRepository

logger = logging.getLogger(__name__)


def empty_progress(user_id: int, day: date) -> DailyProgress:
    """Zero-valued aggregate for a day without meals, never added to a session."""
    return DailyProgress(
        id=None,
        user_id=user_id,
        date=day,
        total_calories=Decimal(0),
        total_protein=Decimal(0),
        total_carbs=Decimal(0),
        total_fat=Decimal(0),
        meals=[],
    )


class ProgressService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.progress = ProgressRepository(db)
        self.meals = MealRepository(db)

    # ------------------------------------------------------------------
    # Maintenance, called by the meal ledger inside its transaction
    # ------------------------------------------------------------------

    async def upsert(self, user_id: int, day: date, delta: Macros, meal_id: Optional[int] = None) -> int:
        progress_id = await self.progress.upsert_increment(user_id, day, delta)
        if meal_id is not None:
            await self.progress.link_meal(progress_id, meal_id)
        return progress_id

    async def apply_delta(self, user_id: int, day: date, delta: Macros) -> None:
        if delta.is_zero():
            return
        progress_id = await self.progress.increment(user_id, day, delta)
        if progress_id is None:
            logger.warning(
                "aggregate inconsistency: no daily progress for user %s on %s, recomputing",
                user_id, day,
            )
            await self.recompute(user_id, day)

    async def remove_meal_ref(self, user_id: int, day: date, meal_id: int, delta: Macros) -> None:
        await self.progress.unlink_meal(meal_id)
        progress_id = await self.progress.increment(user_id, day, -delta)
        if progress_id is None:
            logger.warning(
                "aggregate inconsistency: meal %s removed from user %s on %s without a daily progress row",
                meal_id, user_id, day,
            )

    async def recompute(self, user_id: int, day: date) -> DailyProgress:
        """Resum the day from the meals table and overwrite the stored totals and links."""
        totals, meal_ids = await self.meals.sum_for_day(user_id, day)
        existing = await self.progress.get(user_id, day)
        if not meal_ids and existing is None:
            return empty_progress(user_id, day)

        if existing is not None:
            stored = Macros(*(
                to_cents(value) for value in (
                    existing.total_calories, existing.total_protein,
                    existing.total_carbs, existing.total_fat,
                )
            ))
            if stored != totals:
                logger.warning(
                    "aggregate inconsistency: user %s on %s stored %s, ledger says %s",
                    user_id, day, tuple(stored), tuple(totals),
                )

        progress_id = await self.progress.upsert_replace(user_id, day, totals)
        await self.progress.replace_links(progress_id, meal_ids)
        await self.db.flush()
        return await self.progress.get(user_id, day)

    async def resync(self, user_id: int, day: date) -> DailyProgress:
        """recompute and commit, for repairs requested from outside a meal write"""
        progress = await self.recompute(user_id, day)
        await self.db.commit()
        return progress

    async def recompute_all(self, user_id: Optional[int] = None) -> int:
        """Recompute every day that has meals or a stored aggregate; returns the day count."""
        days = set(await self.meals.days_with_meals(user_id))
        days.update(await self.progress.days(user_id))
        for owner_id, day in sorted(days):
            await self.recompute(owner_id, day)
        await self.db.commit()
        logger.info("Recomputed %d daily aggregates", len(days))
        return len(days)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def read(self, user_id: int, day: date) -> DailyProgress:
        progress = await self.progress.get(user_id, day)
        if progress is None:
            return empty_progress(user_id, day)
        return progress

    async def read_range(self, user_id: int, start: date, end: date) -> List[DailyProgress]:
        if start > end:
            raise ValidationError("Start date must not be after end date")
        return await self.progress.list_range(user_id, start, end)

    async def list(self, user_id: int) -> List[DailyProgress]:
        return await self.progress.list_for_user(user_id)
