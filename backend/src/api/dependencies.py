"""FastAPI dependencies for injection."""
from fastapi import Depends, HTTPException, status

from core.config import Settings, get_settings
from core.user_cache import get_user_store
from db.session import get_async_session
from services.user_service import UserService
from services.user_store import UserStore


def require_user_store() -> UserStore:
    """Return the store set up at startup, or fail with 503 if there is none."""
    store = get_user_store()
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="User store is not initialized",
        )
    return store


def get_user_service(
    store: UserStore = Depends(require_user_store),
    settings: Settings = Depends(get_settings),
) -> UserService:
    """Build the user service over the shared store."""
    return UserService(store, min_age=settings.min_registration_age)


__all__ = [
    "get_async_session",
    "get_settings",
    "get_user_service",
    "require_user_store",
]
