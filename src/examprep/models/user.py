"""User model for role-based access control."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from examprep.models.base import Base

ADMIN_ROLE = "admin"


class User(Base):
    """A domain user keyed by the identity provider's subject."""

    __tablename__ = "users"
    # attempts keep these ids after deletion, so they are never reused
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    roles: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    # "metadata" is reserved on declarative classes
    user_metadata: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    @property
    def is_admin(self) -> bool:
        """Check if the user carries the admin role."""
        return ADMIN_ROLE in self.roles
