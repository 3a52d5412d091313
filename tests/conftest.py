"""
Pytest fixtures for testing.

Tests run against an in-memory SQLite database by default. Set
``TEST_POSTGRES=1`` to run against a disposable PostgreSQL container instead;
each test then runs in a transaction that is rolled back afterwards.
"""
import os
from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from testcontainers.postgres import PostgresContainer

from api.main import create_app
from core.auth import AuthenticatedUser
from core.config import Settings
from core.security import create_token, hash_password
from db.session import get_async_session
from models.base import Base
from models.user import User, UserRole
from tests.fakes import FakeImageStorage

USE_POSTGRES = os.environ.get("TEST_POSTGRES") == "1"
SQLITE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "password123"


@pytest.fixture(scope="session")
def database_url() -> Generator[str]:
    """Database URL for the test session (SQLite unless TEST_POSTGRES=1)."""
    if not USE_POSTGRES:
        yield SQLITE_URL
        return
    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        yield postgres.get_connection_url()


@pytest.fixture
def settings(database_url: str) -> Settings:
    """Explicit settings for tests; nothing is read from .env."""
    return Settings(
        _env_file=None,
        database_url=database_url,
        access_token_secret="test-access-secret",
        refresh_token_secret="test-refresh-secret",
        password_hash_rounds=4,
        cloudinary_cloud_name="demo",
        cloudinary_api_key="123456",
        cloudinary_api_secret="cloud-secret",
        max_image_size_bytes=1024,
    )


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine with the schema in place."""
    if USE_POSTGRES:
        engine = create_async_engine(database_url, echo=False)
    else:
        # One shared connection so every session sees the same in-memory database
        engine = create_async_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session for a test.

    On PostgreSQL the session is bound to an outer transaction that is rolled
    back after the test, using savepoints so the code under test can flush and
    roll back freely. On SQLite every test gets a fresh in-memory database.
    """
    if not USE_POSTGRES:
        session_factory = async_sessionmaker(
            async_engine, class_=AsyncSession, expire_on_commit=False,
        )
        async with session_factory() as session:
            yield session
        return

    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        session_factory = async_sessionmaker(
            bind=connection,
            class_=AsyncSession,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )
        try:
            async with session_factory() as session:
                yield session
        finally:
            await transaction.rollback()


@pytest.fixture
def image_storage() -> FakeImageStorage:
    """Image storage double that records uploads."""
    return FakeImageStorage()


async def make_user(
    db_session: AsyncSession,
    email: str,
    username: str = "tester",
    role: UserRole = UserRole.USER,
    password: str = TEST_PASSWORD,
) -> User:
    """Insert a user directly, bypassing the service layer."""
    user = User(
        username=username,
        email=email,
        password=hash_password(password, rounds=4),
        role=role,
        created_by=username,
        updated_by=username,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


def as_actor(user: User) -> AuthenticatedUser:
    """The request identity the auth guard would build for a user."""
    return AuthenticatedUser(id=user.id, username=user.username, email=user.email, role=user.role)


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a regular user."""
    return await make_user(db_session, "test@example.com", "tester")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second regular user for ownership tests."""
    return await make_user(db_session, "other@example.com", "other")


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an administrator."""
    return await make_user(db_session, "admin@example.com", "admin", role=UserRole.ADMIN)


@pytest.fixture
def actor(test_user: User) -> AuthenticatedUser:
    """Identity of ``test_user`` as seen by services."""
    return as_actor(test_user)


@pytest.fixture
def app(
    settings: Settings,
    db_session: AsyncSession,
    image_storage: FakeImageStorage,
) -> Generator[FastAPI]:
    """Application wired to the test session and the fake image storage."""
    application = create_app(settings, image_storage=image_storage)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    application.dependency_overrides[get_async_session] = override_get_async_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Unauthenticated test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


def bearer(user: User, settings: Settings) -> dict[str, str]:
    """Authorization header carrying a valid access token for a user."""
    claims = {
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role.value,
    }
    return {"Authorization": f"Bearer {create_token(claims, 'access', settings)}"}


@pytest.fixture
def auth_headers(test_user: User, settings: Settings) -> dict[str, str]:
    """Authorization header for ``test_user``."""
    return bearer(test_user, settings)
