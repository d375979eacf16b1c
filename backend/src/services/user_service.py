"""Service layer for user registration and listing."""
import logging
from typing import TYPE_CHECKING

from core.config import Settings
from schemas.user_record import UserRecord
from services.exceptions import DuplicateEmailError, StoreError, UnderageUserError

if TYPE_CHECKING:
    from services.user_store import UserStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_REGISTRATION_AGE: int = Settings.model_fields["min_registration_age"].default


class UserService:
    """
    Registration rules on top of any UserStore.

    The service does not know whether the store it was given caches.
    """

    def __init__(
        self,
        store: "UserStore",
        min_age: int = DEFAULT_MIN_REGISTRATION_AGE,
    ) -> None:
        self._store = store
        self._min_age = min_age

    async def create(self, record: UserRecord) -> None:
        """
        Register a new user.

        Raises:
            UnderageUserError: If the user is younger than the minimum age.
            DuplicateEmailError: If the email is already registered.
            StoreError: If the store fails.
        """
        if record.age < self._min_age:
            raise UnderageUserError(record.age, self._min_age)

        existing = await self._store.get_by_email(record.email)
        if existing is not None:
            raise DuplicateEmailError(record.email)

        try:
            await self._store.create(record)
        except StoreError as insert_error:
            # Race: another request registered the same email between our
            # lookup and insert, and the unique index rejected this one.
            try:
                winner = await self._store.get_by_email(record.email)
            except StoreError as lookup_error:
                logger.warning(
                    "user_duplicate_recheck_failed email=%s error=%s", record.email, lookup_error,
                )
                raise insert_error
            if winner is not None:
                raise DuplicateEmailError(record.email) from None
            raise
        logger.info("user_registered email=%s", record.email)

    async def list(self) -> list[UserRecord]:
        """Return every registered user."""
        return await self._store.list()
