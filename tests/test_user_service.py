"""Integration tests for user lookup, creation and role management."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.exceptions import ConflictError, NotFoundError
from examprep.models.user import ADMIN_ROLE
from examprep.services.user import UserService


@pytest.fixture
def service() -> UserService:
    return UserService(admin_external_ids=["user_root"])


class TestGetOrCreate:
    """Tests for first-access user creation."""

    async def test_creates_once(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        """Repeated calls return the same user."""
        first = await service.get_or_create_user(test_session, "user_1", "Alice")
        second = await service.get_or_create_user(test_session, "user_1", "Renamed")

        assert first.id == second.id
        assert second.display_name == "Alice"
        assert second.roles == []
        assert len(await service.list_users(test_session)) == 1

    async def test_bootstrap_admin(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        """Configured external ids receive the admin role on creation."""
        user = await service.get_or_create_user(test_session, "user_root")

        assert user.roles == [ADMIN_ROLE]
        assert user.is_admin is True
        assert user.display_name == ""


class TestRoles:
    """Tests for role grants and checks."""

    async def test_add_role_is_idempotent(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        await service.get_or_create_user(test_session, "user_1")

        await service.add_role(test_session, "user_1", ADMIN_ROLE)
        user = await service.add_role(test_session, "user_1", ADMIN_ROLE)

        assert user.roles == [ADMIN_ROLE]
        assert await service.has_role(test_session, "user_1", ADMIN_ROLE) is True

    async def test_remove_role_is_idempotent(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        await service.get_or_create_user(test_session, "user_root")

        await service.remove_role(test_session, "user_root", ADMIN_ROLE)
        user = await service.remove_role(test_session, "user_root", ADMIN_ROLE)

        assert user.roles == []
        assert await service.has_role(test_session, "user_root", ADMIN_ROLE) is False

    async def test_role_change_for_unknown_user(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        with pytest.raises(NotFoundError):
            await service.add_role(test_session, "user_ghost", ADMIN_ROLE)

    async def test_unknown_user_holds_no_roles(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        assert await service.has_role(test_session, "user_ghost", ADMIN_ROLE) is False

    async def test_get_admins(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        """Only users holding the admin role are listed."""
        await service.get_or_create_user(test_session, "user_root")
        await service.get_or_create_user(test_session, "user_1")
        await service.create_user(
            test_session, "user_2", "Editor", roles=["editor", ADMIN_ROLE]
        )

        admins = await service.get_admins(test_session)

        assert sorted(user.external_id for user in admins) == ["user_2", "user_root"]


class TestManageUsers:
    """Tests for explicit user administration."""

    async def test_create_user_dedupes_roles(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        user = await service.create_user(
            test_session,
            "user_1",
            "Alice",
            roles=[ADMIN_ROLE, ADMIN_ROLE],
            metadata={"plan": "pro"},
        )

        assert user.roles == [ADMIN_ROLE]
        assert user.user_metadata == {"plan": "pro"}

    async def test_create_duplicate_external_id(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        """An external identity maps to at most one user."""
        await service.create_user(test_session, "user_1", "Alice", roles=[])

        with pytest.raises(ConflictError) as exc_info:
            await service.create_user(test_session, "user_1", "Bob", roles=[])

        assert exc_info.value.details["field"] == "external_id"

    async def test_update_user(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        user = await service.create_user(test_session, "user_1", "Alice", roles=[])

        updated = await service.update_user(
            test_session, user.id, "Alice B.", roles=["editor"], metadata=None
        )

        assert updated.display_name == "Alice B."
        assert updated.roles == ["editor"]
        assert updated.user_metadata is None

    async def test_update_metadata(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        await service.get_or_create_user(test_session, "user_1")

        user = await service.update_metadata(
            test_session, "user_1", {"theme": "dark"}
        )

        assert user.user_metadata == {"theme": "dark"}

    async def test_update_and_delete_missing_user(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        with pytest.raises(NotFoundError):
            await service.update_user(test_session, 999, "Ghost", roles=[])
        with pytest.raises(NotFoundError):
            await service.delete_user(test_session, 999)

    async def test_delete_user(
        self,
        test_session: AsyncSession,
        service: UserService,
    ) -> None:
        user = await service.create_user(test_session, "user_1", "Alice", roles=[])

        await service.delete_user(test_session, user.id)

        assert await service.get_by_external_id(test_session, "user_1") is None
