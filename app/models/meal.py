import enum
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Numeric, Date, DateTime, Boolean, JSON, Enum, ForeignKey,
    CheckConstraint, Index,
)
from sqlalchemy.orm import relationship
from app.core.base import Base


class MealTypeEnum(str, enum.Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


MACRO_FIELDS = ("calories", "protein", "carbs", "fat")

# macros are stored as NUMERIC(10, 2) so sums of deltas stay exact
CENT = Decimal("0.01")
MAX_MACRO = Decimal("99999999.99")


def to_cents(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class Meal(Base):
    __tablename__ = "meals"
    __table_args__ = (
        CheckConstraint("calories >= 0", name="ck_meals_calories_non_negative"),
        CheckConstraint("protein >= 0", name="ck_meals_protein_non_negative"),
        CheckConstraint("carbs >= 0", name="ck_meals_carbs_non_negative"),
        CheckConstraint("fat >= 0", name="ck_meals_fat_non_negative"),
        Index("ix_meals_user_id_date", "user_id", "date"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    meal_type = Column(Enum(MealTypeEnum), default=MealTypeEnum.snack, nullable=False)
    date = Column(Date, nullable=False)
    calories = Column(Numeric(10, 2), nullable=False)
    protein = Column(Numeric(10, 2), nullable=False)
    carbs = Column(Numeric(10, 2), nullable=False)
    fat = Column(Numeric(10, 2), nullable=False)

    # copies of upstream recognition / recipe data, no invariants
    image = Column(String, nullable=True)
    category = Column(String, nullable=True)
    ingredients = Column(JSON, nullable=True)
    instructions = Column(JSON, nullable=True)
    is_vegetarian = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="meals")


class Macros(NamedTuple):
    calories: Decimal = Decimal(0)
    protein: Decimal = Decimal(0)
    carbs: Decimal = Decimal(0)
    fat: Decimal = Decimal(0)

    @classmethod
    def of(cls, meal: "Meal") -> "Macros":
        return cls(*(to_cents(getattr(meal, field)) for field in MACRO_FIELDS))

    def __neg__(self) -> "Macros":
        return Macros(*(-value for value in self))

    def __sub__(self, other: "Macros") -> "Macros":
        return Macros(*(a - b for a, b in zip(self, other)))

    def __add__(self, other: "Macros") -> "Macros":
        return Macros(*(a + b for a, b in zip(self, other)))

    def is_zero(self) -> bool:
        return not any(self)
