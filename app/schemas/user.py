from datetime import datetime
from typing import Any, List, Optional

from pydantic import EmailStr, Field, field_validator

from app.models.user import GenderEnum, RoleEnum
from app.schemas.base import CamelModel


class Preference(CamelModel):
    type: str = Field(min_length=1)
    value: Any = None


class UserRead(CamelModel):
    id: int
    email: EmailStr
    full_name: str
    name: Optional[str] = None
    gender: Optional[GenderEnum] = None
    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    goal: Optional[str] = None
    activity_level: Optional[str] = None
    preferences: List[Preference] = []
    role: RoleEnum = RoleEnum.user
    created_at: Optional[datetime] = None

    @field_validator("preferences", mode="before")
    @classmethod
    def default_preferences(cls, value):
        return [] if value is None else value


class UserUpdate(CamelModel):
    """Profile fields a user may change; the password is not one of them."""

    full_name: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    gender: Optional[GenderEnum] = None
    age: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    height: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    goal: Optional[str] = None
    activity_level: Optional[str] = None
    preferences: Optional[List[Preference]] = None

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value
