"""Pytest configuration and fixtures for SensorHub tests."""

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from sensorhub.main import fastapi_app as app
from sensorhub.models import Base, Device, User
from sensorhub.core.deps import get_db, get_status_cache
from sensorhub.core.security import get_password_hash
from sensorhub.services.reading_store import SQLReadingStore
from sensorhub.services.status_cache import StatusCache

# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "TestPassword123!"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine with shared connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock for cache expiry."""
    return FakeClock()


@pytest.fixture
def status_cache(clock: FakeClock) -> StatusCache:
    """Latest-status cache driven by the fake clock."""
    return StatusCache(ttl_seconds=60, clock=clock)


@pytest.fixture
def reading_store(db_session: AsyncSession) -> SQLReadingStore:
    """SQL-backed reading store on the test session."""
    return SQLReadingStore(db_session)


@pytest_asyncio.fixture(scope="function")
async def client(db_engine, status_cache: StatusCache) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with database and cache overrides."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with async_session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_status_cache] = lambda: status_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    user = User(
        id=uuid.uuid4(),
        email="test@example.com",
        hashed_password=get_password_hash(TEST_PASSWORD),
        full_name="Test User",
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_headers(client: AsyncClient, test_user: User) -> dict[str, str]:
    """Bearer headers for the test user."""
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": TEST_PASSWORD},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_device(db_session: AsyncSession) -> Device:
    """Create a registered device."""
    device = Device(
        id=uuid.uuid4(),
        name="Greenhouse Sensor",
        location="Building A",
        api_key="test-api-key-1",
    )
    db_session.add(device)
    await db_session.commit()
    await db_session.refresh(device)
    return device


@pytest_asyncio.fixture
async def other_device(db_session: AsyncSession) -> Device:
    """Create a second registered device."""
    device = Device(
        id=uuid.uuid4(),
        name="Warehouse Sensor",
        location="Building B",
        api_key="test-api-key-2",
    )
    db_session.add(device)
    await db_session.commit()
    await db_session.refresh(device)
    return device
