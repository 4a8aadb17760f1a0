"""
Shared fixtures for the NutriTrack backend tests.

Strategy:
- The test FastAPI app is built with create_app(); ASGITransport sends no
  lifespan events, so startup (PostgreSQL init) never runs.
- Auth endpoint tests replace UserRepository with an AsyncMock (mock_repo).
- Ledger and progress tests run against an in-memory SQLite database
  (aiosqlite, StaticPool) so the aggregate SQL actually executes; get_db is
  overridden to hand out sessions bound to it.
- JWTs are minted with auth_service.issue() to exercise the real auth dependency.
"""

import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.base import Base
from app.core.database import init_database
from app.core.db import get_db
from app.core.dependencies import get_user_repository
from app.main import create_app
from app.models.user import User, RoleEnum
from app.repositories.user_repository import UserRepository
from app.services.auth_service import auth_service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Application under test, no startup events."""
    return create_app()


def make_auth_headers(user: User) -> dict:
    """Authorization header with a valid token for the given user."""
    return {"Authorization": f"Bearer {auth_service.issue(user.id)}"}


async def register(client: AsyncClient, email: str = "user@example.com", password: str = "password123",
                   full_name: str = "Test User") -> dict:
    """Register through the API and return auth headers for the new account."""
    response = await client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "fullName": full_name,
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    """Regular user."""
    return User(
        id=1,
        email="test@example.com",
        full_name="Test User",
        name="Test",
        password=auth_service.hash_password("password123"),
        role=RoleEnum.user,
        created_at=datetime.utcnow(),
    )


@pytest.fixture
def mock_repo() -> AsyncMock:
    """Mocked UserRepository for the auth endpoints."""
    return AsyncMock(spec=UserRepository)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_database(test_engine)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(mock_repo) -> AsyncGenerator[AsyncClient, None]:
    """
    Client for the auth endpoints: get_user_repository -> mock_repo.
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_repo
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def db_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Client backed by the in-memory SQLite database, one session per request.
    """
    app = create_test_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
