"""Tests for user and role endpoints."""

from httpx import AsyncClient


class TestCurrentUser:
    """Tests for /api/users/me."""

    async def test_get_me(
        self,
        client: AsyncClient,
        student_headers: dict[str, str],
    ) -> None:
        response = await client.get("/api/users/me", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["external_id"] == "user_student"
        assert data["is_admin"] is False
        assert data["metadata"] is None

    async def test_get_me_before_sync_is_404(
        self,
        client: AsyncClient,
        make_auth_headers,
    ) -> None:
        response = await client.get(
            "/api/users/me", headers=make_auth_headers("user_fresh")
        )

        assert response.status_code == 404

    async def test_sync_uses_body_display_name(
        self,
        client: AsyncClient,
        make_auth_headers,
    ) -> None:
        response = await client.post(
            "/api/users/me",
            json={"display_name": "Sam"},
            headers=make_auth_headers("user_fresh", name="Samuel"),
        )

        assert response.status_code == 200
        assert response.json()["display_name"] == "Sam"


class TestRoleManagement:
    """Tests for role grant, revoke and checks."""

    async def test_grant_and_revoke_admin(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        student_headers: dict[str, str],
    ) -> None:
        """A granted role takes effect on the next request."""
        granted = await client.post(
            "/api/users/by-external-id/user_student/roles",
            json={"role": "admin"},
            headers=admin_headers,
        )
        assert granted.status_code == 200
        assert granted.json()["roles"] == ["admin"]

        check = await client.get(
            "/api/users/by-external-id/user_student/roles/admin",
            headers=admin_headers,
        )
        assert check.json() == {
            "external_id": "user_student",
            "role": "admin",
            "has_role": True,
        }

        as_new_admin = await client.get("/api/users/admins", headers=student_headers)
        assert as_new_admin.status_code == 200
        assert len(as_new_admin.json()) == 2

        revoked = await client.delete(
            "/api/users/by-external-id/user_student/roles/admin",
            headers=admin_headers,
        )
        assert revoked.json()["roles"] == []

        denied = await client.get("/api/users/admins", headers=student_headers)
        assert denied.status_code == 403

    async def test_role_change_for_unknown_user(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/api/users/by-external-id/user_ghost/roles",
            json={"role": "admin"},
            headers=admin_headers,
        )

        assert response.status_code == 404

    async def test_lookup_by_external_id(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        student_user,
    ) -> None:
        found = await client.get(
            "/api/users/by-external-id/user_student", headers=admin_headers
        )
        missing = await client.get(
            "/api/users/by-external-id/user_ghost", headers=admin_headers
        )

        assert found.json()["id"] == student_user.id
        assert missing.status_code == 200
        assert missing.json() is None

    async def test_replace_metadata(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        student_user,
    ) -> None:
        response = await client.put(
            "/api/users/by-external-id/user_student/metadata",
            json={"metadata": {"exam": "USMLE Step 1"}},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["metadata"] == {"exam": "USMLE Step 1"}


class TestUserAdministration:
    """Tests for explicit user create, update and delete."""

    async def test_create_update_delete(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
    ) -> None:
        created = await client.post(
            "/api/users/",
            json={"external_id": "user_new", "display_name": "New", "roles": []},
            headers=admin_headers,
        )
        assert created.status_code == 201
        user_id = created.json()["id"]

        duplicate = await client.post(
            "/api/users/",
            json={"external_id": "user_new", "display_name": "Again", "roles": []},
            headers=admin_headers,
        )
        assert duplicate.status_code == 409

        updated = await client.put(
            f"/api/users/{user_id}",
            json={"display_name": "Renamed", "roles": ["editor"], "metadata": {"a": 1}},
            headers=admin_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["display_name"] == "Renamed"
        assert updated.json()["roles"] == ["editor"]

        deleted = await client.delete(f"/api/users/{user_id}", headers=admin_headers)
        assert deleted.status_code == 204

        missing = await client.delete(f"/api/users/{user_id}", headers=admin_headers)
        assert missing.status_code == 404
