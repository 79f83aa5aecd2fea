"""Repository for user database operations."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.models.user import User


class UserRepository:
    """Handle user persistence operations."""

    @staticmethod
    async def create(
        session: AsyncSession,
        external_id: str,
        display_name: str,
        roles: list[str],
        metadata: dict[str, Any] | None = None,
    ) -> User:
        """Create a new user record."""
        user = User(
            external_id=external_id,
            display_name=display_name,
            roles=roles,
            user_metadata=metadata,
        )
        session.add(user)
        await session.flush()
        await session.refresh(user)
        return user

    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
        """Retrieve a user by its ID."""
        return await session.get(User, user_id)

    @staticmethod
    async def get_by_external_id(
        session: AsyncSession,
        external_id: str,
    ) -> User | None:
        """Retrieve a user by identity provider subject."""
        result = await session.execute(
            select(User).where(User.external_id == external_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_all(session: AsyncSession) -> list[User]:
        """Retrieve all users."""
        result = await session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    @staticmethod
    async def update(
        session: AsyncSession,
        user: User,
        updates: dict[str, Any],
    ) -> User:
        """Apply field updates to a user."""
        for field, value in updates.items():
            setattr(user, field, value)
        await session.flush()
        await session.refresh(user)
        return user

    @staticmethod
    async def delete(session: AsyncSession, user: User) -> None:
        """Delete a user record."""
        await session.delete(user)
        await session.flush()
