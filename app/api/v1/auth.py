from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_current_user, get_user_repository
from app.core.exceptions import InvalidCredentialsError
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.auth_service import auth_service
from app.schemas.auth import UserLogin, UserRegister, AuthResponse
from app.schemas.user import UserRead

router = APIRouter(tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=auth_service.issue(user.id),
        token_type="bearer",
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(user: UserLogin, repo: UserRepository = Depends(get_user_repository)):
    """Check email and password, issue a bearer token"""
    authenticated_user = await auth_service.authenticate_user(repo, user)
    if not authenticated_user:
        raise InvalidCredentialsError()

    return _auth_response(authenticated_user)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
async def register(user: UserRegister, repo: UserRepository = Depends(get_user_repository)):
    """Create an account and issue a bearer token"""
    new_user = await auth_service.register_user(repo, user)
    return _auth_response(new_user)


@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)):
    """Who the presented token belongs to"""
    return current_user
