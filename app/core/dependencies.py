from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.exceptions import InvalidTokenError, MissingTokenError, NotFoundError
from app.models.user import User
from app.repositories.feedback_repository import FeedbackRepository
from app.repositories.user_repository import UserRepository
from app.services.auth_service import auth_service
from app.services.meal_service import MealService, OwnedMeal
from app.services.progress_service import ProgressService


# auto_error=False: a missing header is a 401 from us, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Repository factory, injected into endpoints through Depends."""
    return UserRepository(db)


def get_meal_service(db: AsyncSession = Depends(get_db)) -> MealService:
    return MealService(db)


def get_progress_service(db: AsyncSession = Depends(get_db)) -> ProgressService:
    return ProgressService(db)


def get_feedback_repository(db: AsyncSession = Depends(get_db)) -> FeedbackRepository:
    return FeedbackRepository(db)


async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        repo: UserRepository = Depends(get_user_repository),
) -> User:
    if credentials is None:
        raise MissingTokenError()

    user_id = auth_service.verify(credentials.credentials)

    user = await repo.get_by_id(user_id)
    if user is None:
        raise InvalidTokenError()

    return user


async def get_owned_meal(
        meal_id: int,
        current_user: User = Depends(get_current_user),
        service: MealService = Depends(get_meal_service),
) -> OwnedMeal:
    """Resolve a meal the caller owns; somebody else's meal looks exactly like a missing one."""
    owned = await service.resolve_owned(current_user.id, meal_id)
    if owned is None:
        raise NotFoundError("Meal not found")
    return owned
