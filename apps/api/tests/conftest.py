"""
Pytest fixtures for testing.

Provides:
- Async SQLite database session (foreign keys enforced)
- HTTP test client bound to that session
- Factory fixtures for creating test data
- In-memory repositories and services for unit tests
"""

from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from identity.main import app
from identity.models import Base, User, FeatureFlag
from identity.api.dependencies.database import get_db
from identity.repositories import (
    DatabaseUserRepository,
    DatabaseFeatureFlagRepository,
    DatabaseAssignmentRepository,
    MemoryStore,
    MemoryUserRepository,
    MemoryFeatureFlagRepository,
    MemoryAssignmentRepository,
)
from identity.services.user import UserService
from identity.services.feature_flag import FeatureFlagService


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite ignores foreign keys unless asked
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session, rolled back after each test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with database session override.
    """

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ Database Repositories ============


@pytest.fixture
def user_repo(db: AsyncSession) -> DatabaseUserRepository:
    return DatabaseUserRepository(db)


@pytest.fixture
def flag_repo(db: AsyncSession) -> DatabaseFeatureFlagRepository:
    return DatabaseFeatureFlagRepository(db)


@pytest.fixture
def assignment_repo(db: AsyncSession) -> DatabaseAssignmentRepository:
    return DatabaseAssignmentRepository(db)


# ============ Factory Fixtures ============


class UserFactory:
    """Factory for creating test users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        email: str | None = None,
        name: str = "Test User",
        enabled: bool = True,
    ) -> User:
        """Create a user in the database."""
        user = User(
            name=name,
            email=email or f"test-{uuid4().hex[:8]}@example.com",
            enabled=enabled,
        )
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user


class FeatureFlagFactory:
    """Factory for creating test feature flags."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        key: str | None = None,
        description: str = "",
        enabled: bool = False,
    ) -> FeatureFlag:
        """Create a feature flag in the database."""
        flag = FeatureFlag(
            key=key or f"flag_{uuid4().hex[:8]}",
            description=description,
            enabled=enabled,
        )
        self.db.add(flag)
        await self.db.flush()
        await self.db.refresh(flag)
        return flag


@pytest_asyncio.fixture
async def user_factory(db: AsyncSession) -> UserFactory:
    """Fixture that provides UserFactory."""
    return UserFactory(db)


@pytest_asyncio.fixture
async def flag_factory(db: AsyncSession) -> FeatureFlagFactory:
    """Fixture that provides FeatureFlagFactory."""
    return FeatureFlagFactory(db)


@pytest_asyncio.fixture
async def test_user(user_factory: UserFactory) -> User:
    """Create a standard test user."""
    return await user_factory.create(email="ann@example.com", name="Ann")


@pytest_asyncio.fixture
async def test_flag(flag_factory: FeatureFlagFactory) -> FeatureFlag:
    """Create a standard, disabled test flag."""
    return await flag_factory.create(key="beta", description="Beta features")


# ============ In-Memory Implementations ============


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def user_service(memory_store: MemoryStore) -> UserService:
    """User service over in-memory repositories."""
    return UserService(
        users=MemoryUserRepository(memory_store),
        flags=MemoryFeatureFlagRepository(memory_store),
        assignments=MemoryAssignmentRepository(memory_store),
    )


@pytest.fixture
def flag_service(memory_store: MemoryStore) -> FeatureFlagService:
    """Feature flag service over in-memory repositories."""
    return FeatureFlagService(
        flags=MemoryFeatureFlagRepository(memory_store),
        assignments=MemoryAssignmentRepository(memory_store),
    )
