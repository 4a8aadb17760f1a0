from datetime import datetime

from sqlalchemy import (
    Column, Integer, Numeric, Date, DateTime, ForeignKey, Table, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.core.base import Base

# Meals summed into a day's totals
daily_progress_meals = Table(
    "daily_progress_meals",
    Base.metadata,
    Column("progress_id", Integer, ForeignKey("daily_progress.id", ondelete="CASCADE"), primary_key=True),
    Column("meal_id", Integer, ForeignKey("meals.id", ondelete="CASCADE"), primary_key=True),
)


class DailyProgress(Base):
    """Per-user, per-day nutrition totals derived from the meals table."""

    __tablename__ = "daily_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_progress_user_id_date"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    total_calories = Column(Numeric(14, 2), default=0, nullable=False)
    total_protein = Column(Numeric(14, 2), default=0, nullable=False)
    total_carbs = Column(Numeric(14, 2), default=0, nullable=False)
    total_fat = Column(Numeric(14, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="progress")
    meals = relationship(
        "Meal",
        secondary=daily_progress_meals,
        order_by="Meal.id",
        lazy="selectin",
    )
