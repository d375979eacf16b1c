"""In-process user cache and the caching proxy for user stores."""
import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from core.rw_lock import ReadWriteLock
from schemas.user_record import UserRecord

if TYPE_CHECKING:
    from services.user_store import UserStore

logger = logging.getLogger(__name__)


class UserCache:
    """
    Thread-safe mapping from email to user record.

    Entries are never evicted, expired, or deleted; they can only be added or
    overwritten. Reads share a reader/writer lock, writes hold it exclusively.
    """

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}
        self._lock = ReadWriteLock()

    def get(self, email: str) -> tuple[UserRecord | None, bool]:
        """
        Look up a cached user.

        Returns:
            (record, True) on hit, (None, False) on miss.
        """
        with self._lock.read_locked():
            user = self._users.get(email)
        return user, user is not None

    def set(self, email: str, user: UserRecord) -> None:
        """Insert or overwrite the entry for `email`. Last writer wins."""
        with self._lock.write_locked():
            self._users[email] = user

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._users)

    def list(self) -> list[UserRecord]:
        """
        Snapshot of all cached users, in no particular order.

        The returned list holds copies, so later writes to the cache are not
        visible through it.
        """
        with self._lock.read_locked():
            return [replace(user) for user in self._users.values()]


class CachedUserStore:
    """
    User store proxy that serves reads from a UserCache when it can.

    Implements the same contract as the store it wraps. Every write goes to the
    wrapped store first; the cache is only updated after the store call has
    succeeded, and never while a store call is in flight. Store errors are never
    caught here.

    The cache owns its entries: records going in and coming out are copied, so
    callers can modify what they pass or receive without touching the cache.

    Cached entries are not refreshed: a row changed directly in the database
    stays stale in the cache until it is written again through this proxy.
    """

    def __init__(self, store: "UserStore", cache: UserCache | None = None) -> None:
        self._store = store
        self._cache = cache if cache is not None else UserCache()

    @property
    def cache(self) -> UserCache:
        """The cache this proxy populates."""
        return self._cache

    async def create(self, record: UserRecord) -> None:
        """Create the user in the wrapped store, then cache it."""
        await self._store.create(record)
        self._cache.set(record.email, replace(record))
        logger.debug("user_cache_set email=%s source=create", record.email)

    async def get_by_email(self, email: str) -> UserRecord | None:
        """
        Return the user from the cache, falling back to the wrapped store.

        A user found in the store is cached before it is returned. A user missing
        from the store returns None and nothing is cached.
        """
        user, found = self._cache.get(email)
        if found:
            logger.debug("user_cache_hit email=%s", email)
            return replace(user)
        logger.debug("user_cache_miss email=%s", email)

        user = await self._store.get_by_email(email)
        if user is None:
            return None
        self._cache.set(email, replace(user))
        logger.debug("user_cache_set email=%s source=get_by_email", email)
        return user

    async def list(self) -> list[UserRecord]:
        """
        Return all users.

        A non-empty cache is treated as warm and answers directly. An empty cache
        always queries the wrapped store, so an empty database is re-queried on
        every call.
        """
        cached = self._cache.list()
        if cached:
            logger.debug("user_cache_list_hit count=%s", len(cached))
            return cached

        users = await self._store.list()
        for user in users:
            self._cache.set(user.email, replace(user))
        logger.debug("user_cache_list_miss loaded=%s", len(users))
        return users


# Global user store (set during app startup)
_user_store: "UserStore | None" = None


def get_user_store() -> "UserStore | None":
    """Get the global user store instance."""
    return _user_store


def set_user_store(store: "UserStore | None") -> None:
    """Set the global user store instance."""
    global _user_store  # noqa: PLW0603
    _user_store = store
