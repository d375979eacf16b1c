"""User model for registered users."""
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from schemas.user_record import UserRecord


class User(Base):
    """User model - one row per registered email address."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        comment="Case-sensitive login identifier",
    )
    # Stored as provided; hashing is out of scope for this service
    password: Mapped[str] = mapped_column(String(255))
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)

    @classmethod
    def from_record(cls, record: UserRecord) -> "User":
        """Build an unsaved row from a user record."""
        return cls(
            email=record.email,
            password=record.password,
            name=record.name,
            age=record.age,
        )

    def to_record(self) -> UserRecord:
        """Detach the row into a plain user record."""
        return UserRecord(
            email=self.email,
            password=self.password,
            name=self.name or "",
            age=self.age or 0,
        )
