import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from app.core.dates import to_day
from app.models.meal import MealTypeEnum, MACRO_FIELDS, MAX_MACRO, to_cents
from app.schemas.base import CamelModel


def _split_instructions(value):
    # recipe sources send instructions either as one text block or as a list of steps
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return value


def _strip_name(value):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Name must not be blank")
    return value


class MealBase(CamelModel):
    name: str = Field(min_length=1)
    meal_type: MealTypeEnum = MealTypeEnum.snack
    image: Optional[str] = None
    category: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    is_vegetarian: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _strip_name(value)

    @field_validator("instructions", mode="before")
    @classmethod
    def split_instructions(cls, value):
        return _split_instructions(value)


class MealCreate(MealBase):
    """Command for logging a food item."""

    date: dt.date
    calories: Decimal = Field(ge=0, le=MAX_MACRO, allow_inf_nan=False)
    protein: Decimal = Field(ge=0, le=MAX_MACRO, allow_inf_nan=False)
    carbs: Decimal = Field(ge=0, le=MAX_MACRO, allow_inf_nan=False)
    fat: Decimal = Field(ge=0, le=MAX_MACRO, allow_inf_nan=False)

    @field_validator("date", mode="before")
    @classmethod
    def truncate_date(cls, value):
        return to_day(value)

    @field_validator(*MACRO_FIELDS)
    @classmethod
    def round_to_cents(cls, value: Decimal) -> Decimal:
        return to_cents(value)


class MealUpdate(CamelModel):
    """Partial update, only the fields present in the body are changed."""

    name: Optional[str] = Field(default=None, min_length=1)
    meal_type: Optional[MealTypeEnum] = None
    date: Optional[dt.date] = None
    calories: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MACRO, allow_inf_nan=False)
    protein: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MACRO, allow_inf_nan=False)
    carbs: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MACRO, allow_inf_nan=False)
    fat: Optional[Decimal] = Field(default=None, ge=0, le=MAX_MACRO, allow_inf_nan=False)
    image: Optional[str] = None
    category: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    is_vegetarian: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value):
        return _strip_name(value)

    @field_validator("date", mode="before")
    @classmethod
    def truncate_date(cls, value):
        if value is None:
            return value
        return to_day(value)

    @field_validator(*MACRO_FIELDS)
    @classmethod
    def round_to_cents(cls, value):
        return value if value is None else to_cents(value)

    @field_validator("instructions", mode="before")
    @classmethod
    def split_instructions(cls, value):
        return _split_instructions(value)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        # an explicit null would wipe a column the ledger relies on
        for field in ("name", "meal_type", "date", "is_vegetarian") + MACRO_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class MealRead(MealBase):
    id: int
    user_id: int
    date: dt.date
    calories: float
    protein: float
    carbs: float
    fat: float
    created_at: dt.datetime
    updated_at: dt.datetime


class MealDeleted(CamelModel):
    message: str = "Meal deleted successfully"
