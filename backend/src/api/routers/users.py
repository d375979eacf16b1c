"""User registration and listing endpoints."""
from fastapi import APIRouter, Depends, status

from api.dependencies import get_user_service
from schemas.user import UserCreate, UserResponse
from schemas.user_record import UserRecord
from services.user_service import UserService


router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserRecord:
    """
    Register a new user.

    Rejects users under the minimum age (400) and emails that are already
    registered (409).
    """
    record = data.to_record()
    await service.create(record)
    return record


@router.get("", response_model=list[UserResponse])
async def list_users(
    service: UserService = Depends(get_user_service),
) -> list[UserRecord]:
    """List all registered users."""
    return await service.list()
