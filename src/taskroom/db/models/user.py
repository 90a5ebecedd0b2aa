"""User model."""

from datetime import datetime

from sqlalchemy import VARCHAR, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class User(Base):
    """Application user mirrored from the identity provider.

    Attributes:
        id: Identity provider subject (JWT ``sub`` claim)
        email: Unique email address, used to invite collaborators
        name: Display name
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(VARCHAR(255), primary_key=True)
    email: Mapped[str] = mapped_column(VARCHAR(320), unique=True, index=True)
    name: Mapped[str] = mapped_column(VARCHAR(255))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
