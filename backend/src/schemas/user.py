"""Pydantic schemas for user endpoints."""
from pydantic import BaseModel, ConfigDict, Field

from schemas.user_record import UserRecord


class UserCreate(BaseModel):
    """Schema for registering a new user."""

    email: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Unique, case-sensitive identifier for the user",
    )
    password: str = Field(..., min_length=1, max_length=255)
    name: str = Field(default="", max_length=255)
    age: int = Field(..., description="Age in years; registration enforces a minimum")

    def to_record(self) -> UserRecord:
        """Convert the request body into a user record."""
        return UserRecord(
            email=self.email,
            password=self.password,
            name=self.name,
            age=self.age,
        )


class UserResponse(BaseModel):
    """
    Schema for user responses.

    Does NOT include the password.
    """

    model_config = ConfigDict(from_attributes=True)

    email: str
    name: str
    age: int
