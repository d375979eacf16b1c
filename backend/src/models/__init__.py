"""SQLAlchemy models."""
from models.base import Base
from models.user import User

__all__ = [
    "Base",
    "User",
]
