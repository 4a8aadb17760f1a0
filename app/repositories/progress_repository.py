from datetime import date, datetime
from typing import List, Optional, Sequence

from sqlalchemy import select, update, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.meal import Macros
from app.models.progress import DailyProgress, daily_progress_meals


class ProgressRepository:
    """Data access for daily_progress and its meal links.

    Totals are only ever changed by single SQL statements (``total = total + delta``
    or ``INSERT .. ON CONFLICT DO UPDATE``) so two requests touching the same day
    cannot lose each other's increments. Nothing here commits.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self, table):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        raise RuntimeError(f"Upsert is not supported for the {dialect!r} dialect")

    async def upsert_increment(self, user_id: int, day: date, delta: Macros) -> int:
        """Create the day with ``delta`` as totals, or add ``delta`` to the existing row."""
        now = datetime.utcnow()
        stmt = self._insert(DailyProgress.__table__).values(
            user_id=user_id,
            date=day,
            total_calories=delta.calories,
            total_protein=delta.protein,
            total_carbs=delta.carbs,
            total_fat=delta.fat,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "date"],
            set_={
                "total_calories": DailyProgress.total_calories + stmt.excluded.total_calories,
                "total_protein": DailyProgress.total_protein + stmt.excluded.total_protein,
                "total_carbs": DailyProgress.total_carbs + stmt.excluded.total_carbs,
                "total_fat": DailyProgress.total_fat + stmt.excluded.total_fat,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(DailyProgress.id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def upsert_replace(self, user_id: int, day: date, totals: Macros) -> int:
        """Create or overwrite the day's totals."""
        now = datetime.utcnow()
        stmt = self._insert(DailyProgress.__table__).values(
            user_id=user_id,
            date=day,
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fat=totals.fat,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "date"],
            set_={
                "total_calories": stmt.excluded.total_calories,
                "total_protein": stmt.excluded.total_protein,
                "total_carbs": stmt.excluded.total_carbs,
                "total_fat": stmt.excluded.total_fat,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(DailyProgress.id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def increment(self, user_id: int, day: date, delta: Macros) -> Optional[int]:
        """Add ``delta`` to an existing row; returns its id, or None if the day has no row."""
        result = await self.db.execute(
            update(DailyProgress.__table__)
            .where(
                DailyProgress.__table__.c.user_id == user_id,
                DailyProgress.__table__.c.date == day,
            )
            .values(
                total_calories=DailyProgress.__table__.c.total_calories + delta.calories,
                total_protein=DailyProgress.__table__.c.total_protein + delta.protein,
                total_carbs=DailyProgress.__table__.c.total_carbs + delta.carbs,
                total_fat=DailyProgress.__table__.c.total_fat + delta.fat,
                updated_at=datetime.utcnow(),
            )
            .returning(DailyProgress.__table__.c.id)
        )
        return result.scalar_one_or_none()

    async def link_meal(self, progress_id: int, meal_id: int) -> None:
        stmt = self._insert(daily_progress_meals).values(progress_id=progress_id, meal_id=meal_id)
        await self.db.execute(stmt.on_conflict_do_nothing())

    async def unlink_meal(self, meal_id: int) -> None:
        await self.db.execute(
            delete(daily_progress_meals).where(daily_progress_meals.c.meal_id == meal_id)
        )

    async def replace_links(self, progress_id: int, meal_ids: Sequence[int]) -> None:
        await self.db.execute(
            delete(daily_progress_meals).where(daily_progress_meals.c.progress_id == progress_id)
        )
        for meal_id in meal_ids:
            await self.link_meal(progress_id, meal_id)

    async def get(self, user_id: int, day: date) -> Optional[DailyProgress]:
        result = await self.db.execute(
            select(DailyProgress)
            .where(DailyProgress.user_id == user_id, DailyProgress.date == day)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> List[DailyProgress]:
        result = await self.db.execute(
            select(DailyProgress)
            .where(DailyProgress.user_id == user_id)
            .order_by(DailyProgress.date.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_range(self, user_id: int, start: date, end: date) -> List[DailyProgress]:
        result = await self.db.execute(
            select(DailyProgress)
            .where(
                DailyProgress.user_id == user_id,
                DailyProgress.date >= start,
                DailyProgress.date <= end,
            )
            .order_by(DailyProgress.date.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def days(self, user_id: Optional[int] = None):
        """(user_id, date) of every stored aggregate."""
        stmt = select(DailyProgress.user_id, DailyProgress.date)
        if user_id is not None:
            stmt = stmt.where(DailyProgress.user_id == user_id)
        result = await self.db.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]
