"""User and role management."""

from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.config import settings
from examprep.exceptions import ConflictError, NotFoundError
from examprep.models.user import ADMIN_ROLE, User
from examprep.repositories.user import UserRepository


def _unique_roles(roles: list[str]) -> list[str]:
    return list(dict.fromkeys(roles))


class UserService:
    """Look up, create and manage users and their role sets."""

    def __init__(self, admin_external_ids: list[str] | None = None) -> None:
        self.admin_external_ids = set(
            settings.admin_external_ids
            if admin_external_ids is None
            else admin_external_ids
        )

    async def get_or_create_user(
        self,
        session: AsyncSession,
        external_id: str,
        display_name: str | None = None,
    ) -> User:
        """Return the user for an external identity, creating it on first use."""
        user = await UserRepository.get_by_external_id(session, external_id)
        if user is not None:
            return user

        roles = [ADMIN_ROLE] if external_id in self.admin_external_ids else []
        user = await UserRepository.create(
            session,
            external_id=external_id,
            display_name=display_name or "",
            roles=roles,
        )
        logger.info("User created on first access", user_id=user.id, roles=roles)
        return user

    async def get_by_external_id(
        self,
        session: AsyncSession,
        external_id: str,
    ) -> User | None:
        """Return the user for an external identity, if any."""
        return await UserRepository.get_by_external_id(session, external_id)

    async def list_users(self, session: AsyncSession) -> list[User]:
        """Return all users."""
        return await UserRepository.get_all(session)

    async def get_admins(self, session: AsyncSession) -> list[User]:
        """Return users holding the admin role."""
        users = await UserRepository.get_all(session)
        return [user for user in users if ADMIN_ROLE in user.roles]

    async def has_role(
        self,
        session: AsyncSession,
        external_id: str,
        role: str,
    ) -> bool:
        """Check role membership; unknown users hold no roles."""
        user = await UserRepository.get_by_external_id(session, external_id)
        return user is not None and role in user.roles

    async def add_role(
        self,
        session: AsyncSession,
        external_id: str,
        role: str,
    ) -> User:
        """Grant a role. Granting a held role is a no-op."""
        user = await self._require_user(session, external_id)
        if role in user.roles:
            return user

        user = await UserRepository.update(
            session, user, {"roles": [*user.roles, role]}
        )
        logger.info("Role added", user_id=user.id, role=role)
        return user

    async def remove_role(
        self,
        session: AsyncSession,
        external_id: str,
        role: str,
    ) -> User:
        """Revoke a role. Revoking a role not held is a no-op."""
        user = await self._require_user(session, external_id)
        if role not in user.roles:
            return user

        user = await UserRepository.update(
            session, user, {"roles": [r for r in user.roles if r != role]}
        )
        logger.info("Role removed", user_id=user.id, role=role)
        return user

    async def update_metadata(
        self,
        session: AsyncSession,
        external_id: str,
        metadata: dict[str, Any] | None,
    ) -> User:
        """Replace the metadata bag of a user."""
        user = await self._require_user(session, external_id)
        return await UserRepository.update(session, user, {"user_metadata": metadata})

    async def create_user(
        self,
        session: AsyncSession,
        external_id: str,
        display_name: str,
        roles: list[str],
        metadata: dict[str, Any] | None = None,
    ) -> User:
        """Create a user explicitly; the external identity must be new."""
        if await UserRepository.get_by_external_id(session, external_id) is not None:
            raise ConflictError(
                "User with this external id already exists",
                field="external_id",
            )

        user = await UserRepository.create(
            session,
            external_id=external_id,
            display_name=display_name,
            roles=_unique_roles(roles),
            metadata=metadata,
        )
        logger.info("User created", user_id=user.id, roles=user.roles)
        return user

    async def update_user(
        self,
        session: AsyncSession,
        user_id: int,
        display_name: str,
        roles: list[str],
        metadata: dict[str, Any] | None = None,
    ) -> User:
        """Replace the display name, roles and metadata of a user."""
        user = await UserRepository.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=user_id)

        user = await UserRepository.update(
            session,
            user,
            {
                "display_name": display_name,
                "roles": _unique_roles(roles),
                "user_metadata": metadata,
            },
        )
        logger.info("User updated", user_id=user_id, roles=user.roles)
        return user

    async def delete_user(self, session: AsyncSession, user_id: int) -> None:
        """Delete a user."""
        user = await UserRepository.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=user_id)

        await UserRepository.delete(session, user)
        logger.info("User deleted", user_id=user_id)

    async def _require_user(self, session: AsyncSession, external_id: str) -> User:
        user = await UserRepository.get_by_external_id(session, external_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=external_id)
        return user
