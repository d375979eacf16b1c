"""User storage contract and its database-backed implementation."""
import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from models.user import User
from schemas.user_record import UserRecord
from services.exceptions import StoreError

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    """
    Contract shared by every user store.

    The database store and the caching proxy both implement it, so the service
    layer cannot tell which one it was given.
    """

    async def create(self, record: UserRecord) -> None:
        """Persist a new user. Raises StoreError on failure."""
        ...

    async def list(self) -> list[UserRecord]:
        """Return all users. Raises StoreError on failure."""
        ...

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user with this email, or None. Raises StoreError on failure."""
        ...


class SqlUserStore:
    """
    User store backed by the `users` table.

    Each call opens its own session from the factory, so a single instance can
    be shared by concurrent requests.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, record: UserRecord) -> None:
        """
        Insert a user row and commit.

        Raises:
            StoreError: If the insert or commit fails (including unique violations).
        """
        async with self._session_factory() as session:
            try:
                session.add(User.from_record(record))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.warning("user_store_create_failed email=%s error=%s", record.email, e)
                raise StoreError(f"Failed to create user: {e}") from e

    async def list(self) -> list[UserRecord]:
        """Return all users in insertion order."""
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(User).order_by(User.id))
            except SQLAlchemyError as e:
                raise StoreError(f"Failed to list users: {e}") from e
            return [user.to_record() for user in result.scalars().all()]

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user with this exact email, or None if there is none."""
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(User).where(User.email == email))
            except SQLAlchemyError as e:
                raise StoreError(f"Failed to look up user: {e}") from e
            user = result.scalar_one_or_none()
            return user.to_record() if user is not None else None
