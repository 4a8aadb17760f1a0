from datetime import datetime

from pydantic import Field, field_validator

from app.models.feedback import FeedbackTypeEnum, FeedbackStatusEnum
from app.schemas.base import CamelModel


class FeedbackCreate(CamelModel):
    content: str = Field(min_length=1, max_length=1000)
    type: FeedbackTypeEnum = FeedbackTypeEnum.suggestion

    @field_validator("content")
    @classmethod
    def strip_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Feedback content is required")
        return value


class FeedbackStatusUpdate(CamelModel):
    status: FeedbackStatusEnum


class FeedbackRead(CamelModel):
    id: int
    user_id: int
    content: str
    type: FeedbackTypeEnum
    status: FeedbackStatusEnum
    created_at: datetime
    updated_at: datetime
