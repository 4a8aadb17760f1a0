import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.core.base import Base


class FeedbackTypeEnum(str, enum.Enum):
    suggestion = "suggestion"
    question = "question"
    bug = "bug"
    feature = "feature"
    other = "other"


class FeedbackStatusEnum(str, enum.Enum):
    pending = "pending"
    reviewed = "reviewed"
    implemented = "implemented"
    declined = "declined"


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(String(1000), nullable=False)
    type = Column(Enum(FeedbackTypeEnum), default=FeedbackTypeEnum.suggestion, nullable=False)
    status = Column(Enum(FeedbackStatusEnum), default=FeedbackStatusEnum.pending, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="feedback")
