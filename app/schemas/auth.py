from pydantic import EmailStr, Field, field_validator
from typing import Optional

from app.models.user import GenderEnum
from app.schemas.base import CamelModel
from app.schemas.user import UserRead


def normalize_email(value: str) -> str:
    return value.strip().lower()


class UserLogin(CamelModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, value):
        return normalize_email(value) if isinstance(value, str) else value


class UserRegister(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    name: Optional[str] = None
    gender: Optional[GenderEnum] = None
    age: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    height: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    goal: Optional[str] = None
    activity_level: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def lower_email(cls, value):
        return normalize_email(value) if isinstance(value, str) else value

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name must not be blank")
        return value


class AuthResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
