import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.exceptions import DuplicateEmailError, InvalidTokenError, MissingTokenError
from app.models.user import User, RoleEnum
from app.repositories.user_repository import UserRepository
from app.schemas.auth import UserLogin, UserRegister

logger = logging.getLogger(__name__)


class AuthService:
    """Password hashing plus stateless bearer tokens.

    Tokens carry only the user id and an expiry and are never stored, so they
    cannot be revoked before they expire.
    """

    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_DAYS = settings.ACCESS_TOKEN_EXPIRE_DAYS

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            # not a bcrypt hash
            return False

    def issue(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(days=self.ACCESS_TOKEN_EXPIRE_DAYS)
        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {"sub": str(user_id), "exp": expire}
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def verify(self, token: Optional[str]) -> int:
        """Return the user id a token was issued for."""
        if not token:
            raise MissingTokenError()
        try:
            payload = jwt.decode(token, self.SECRET_KEY, algorithms=[self.ALGORITHM])
        except JWTError:
            raise InvalidTokenError()

        subject = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise InvalidTokenError()

    async def authenticate_user(self, repo: UserRepository, login_data: UserLogin) -> Optional[User]:
        user = await repo.get_by_email(login_data.email)

        if not user or not self.verify_password(login_data.password, user.password):
            return None

        return user

    async def register_user(self, repo: UserRepository, user_data: UserRegister) -> User:
        email = user_data.email.strip().lower()
        if await repo.get_by_email(email):
            raise DuplicateEmailError()

        new_user = User(
            email=email,
            password=self.hash_password(user_data.password),
            full_name=user_data.full_name,
            name=user_data.name or user_data.full_name,
            gender=user_data.gender,
            age=user_data.age,
            weight=user_data.weight,
            height=user_data.height,
            goal=user_data.goal,
            activity_level=user_data.activity_level,
            role=RoleEnum.user,
            created_at=datetime.utcnow()
        )

        try:
            user = await repo.create_user(new_user)
        except IntegrityError:
            # a concurrent registration won the unique index
            await repo.rollback()
            raise DuplicateEmailError()

        logger.info("Registered user %s", user.id)
        return user


auth_service = AuthService()
