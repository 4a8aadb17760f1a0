from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError

from app.core.dependencies import get_current_user, get_user_repository
from app.core.exceptions import DuplicateEmailError, NotFoundError
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import UserRead, UserUpdate

router = APIRouter(tags=["users"])


@router.get("/profile", response_model=UserRead)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Profile of the current user"""
    return current_user


@router.put("/profile", response_model=UserRead)
@router.patch("/profile", response_model=UserRead)
async def update_profile(
        profile_update: UserUpdate,
        current_user: User = Depends(get_current_user),
        repo: UserRepository = Depends(get_user_repository),
):
    """Update only the fields present in the body"""
    update_data = profile_update.model_dump(exclude_unset=True)
    # null is not a valid value for the required columns
    for field in ("email", "full_name", "preferences"):
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    new_email = update_data.get("email")
    if new_email and new_email != current_user.email:
        if await repo.get_by_email(new_email):
            raise DuplicateEmailError()

    try:
        return await repo.update_user(current_user, update_data)
    except IntegrityError:
        await repo.rollback()
        raise DuplicateEmailError()


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, current_user: User = Depends(get_current_user)):
    """Users can only read their own record; any other id is reported as missing"""
    if user_id != current_user.id:
        raise NotFoundError("User not found")
    return current_user
