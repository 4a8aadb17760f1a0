import enum
from sqlalchemy import Column, Integer, String, Float, Enum, DateTime, CheckConstraint, JSON
from sqlalchemy.orm import relationship
from app.core.base import Base
from datetime import datetime

class GenderEnum(str, enum.Enum):
    male = "male"
    female = "female"
    other = "other"

class RoleEnum(str, enum.Enum):
    user = "user"
    admin = "admin"

class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("age IS NULL OR age >= 0", name="ck_users_age_non_negative"),
        CheckConstraint("weight IS NULL OR weight >= 0", name="ck_users_weight_non_negative"),
        CheckConstraint("height IS NULL OR height >= 0", name="ck_users_height_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # always stored lower-cased, which makes the unique index case-insensitive
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    name = Column(String, nullable=True)
    gender = Column(Enum(GenderEnum), nullable=True)
    age = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    goal = Column(String, nullable=True)
    activity_level = Column(String, nullable=True)
    # [{"type": ..., "value": ...}] set by the client, e.g. diet or allergy flags
    preferences = Column(JSON, default=list, nullable=False)
    role = Column(Enum(RoleEnum), default=RoleEnum.user, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    meals = relationship("Meal", back_populates="user", cascade="all, delete")
    progress = relationship("DailyProgress", back_populates="user", cascade="all, delete")
    feedback = relationship("Feedback", back_populates="user", cascade="all, delete")
