"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from api.routers import health, users
from core.config import get_settings
from core.user_cache import CachedUserStore, set_user_store
from db.session import engine, get_session_factory, init_db
from services.exceptions import DuplicateEmailError, StoreError, UnderageUserError
from services.user_store import SqlUserStore, UserStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()

    # Startup: Create tables, then build the (optionally cached) user store
    await init_db(engine)
    store: UserStore = SqlUserStore(get_session_factory())
    if app_settings.user_cache_enabled:
        store = CachedUserStore(store)
        logger.info("User cache enabled")
    else:
        logger.info("User cache disabled by configuration")
    set_user_store(store)

    yield

    # Shutdown: Drop the store (and its cache) and release connections
    set_user_store(None)
    await engine.dispose()


app = FastAPI(
    title="Users API",
    description="User registration and listing with a cached user store.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(UnderageUserError)
async def underage_user_exception_handler(
    _request: Request, exc: UnderageUserError,
) -> JSONResponse:
    """Reject registrations below the minimum age."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


@app.exception_handler(DuplicateEmailError)
async def duplicate_email_exception_handler(
    _request: Request, exc: DuplicateEmailError,
) -> JSONResponse:
    """Reject registrations for an email that is already taken."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc)},
    )


@app.exception_handler(StoreError)
async def store_exception_handler(
    _request: Request, exc: StoreError,
) -> JSONResponse:
    """Report store failures without leaking database details."""
    # Log full details for debugging (server-side only)
    logger.error("User store failure: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "User store is unavailable. Please try again later."},
    )


app.include_router(health.router)
app.include_router(users.router)
