"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Must be set before any app imports that trigger Settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from core.user_cache import CachedUserStore, UserCache  # noqa: E402
from models.base import Base  # noqa: E402
from schemas.user_record import UserRecord  # noqa: E402
from services.exceptions import StoreError  # noqa: E402
from services.user_store import SqlUserStore  # noqa: E402


class CountingUserStore:
    """
    In-memory UserStore that records every call made to it.

    Set `fail_with` to make the next calls raise that exception instead.
    """

    def __init__(self, users: list[UserRecord] | None = None) -> None:
        self.users: dict[str, UserRecord] = {u.email: u for u in users or []}
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    def _record_call(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    async def create(self, record: UserRecord) -> None:
        self._record_call("create")
        if record.email in self.users:
            raise StoreError(f"duplicate email: {record.email}")
        self.users[record.email] = record

    async def get_by_email(self, email: str) -> UserRecord | None:
        self._record_call("get_by_email")
        return self.users.get(email)

    async def list(self) -> list[UserRecord]:
        self._record_call("list")
        return list(self.users.values())

    def count(self, name: str) -> int:
        """Number of calls made to the named operation."""
        return self.calls.count(name)


def make_user(email: str = "alice@example.com", age: int = 30, name: str = "Alice") -> UserRecord:
    """Build a user record with sensible defaults."""
    return UserRecord(email=email, password="secret", name=name, age=age)


@pytest.fixture
def counting_store() -> CountingUserStore:
    """Empty call-counting store."""
    return CountingUserStore()


@pytest.fixture
def cached_counting_store(counting_store: CountingUserStore) -> CachedUserStore:
    """Caching proxy over the call-counting store."""
    return CachedUserStore(counting_store, UserCache())


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create an in-memory SQLite engine with the schema in place.

    StaticPool keeps a single connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """A session on the test database, for direct inspection."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def sql_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlUserStore:
    """Database store on the test engine."""
    return SqlUserStore(session_factory)


@pytest.fixture
def cached_sql_store(sql_store: SqlUserStore) -> CachedUserStore:
    """Caching proxy over the database store."""
    return CachedUserStore(sql_store)


@pytest.fixture
async def client(
    db_session: AsyncSession,
    cached_sql_store: CachedUserStore,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client wired to the test database and a fresh cached store."""
    # Clear the settings cache so it picks up DATABASE_URL from environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from core.user_cache import set_user_store
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session
    set_user_store(cached_sql_store)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    set_user_store(None)
    app.dependency_overrides.clear()
