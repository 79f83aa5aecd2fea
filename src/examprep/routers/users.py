"""User and role management endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.auth import CallerIdentity, get_current_user, require_admin, require_identity
from examprep.db import get_db
from examprep.models.user import User
from examprep.schemas import ErrorResponse
from examprep.schemas.user import (
    MetadataUpdateRequest,
    RoleCheckResponse,
    RoleRequest,
    UserCreateRequest,
    UserResponse,
    UserSyncRequest,
    UserUpdateRequest,
)
from examprep.services.user import UserService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post(
    "/me",
    response_model=UserResponse,
    summary="Get or create the caller's user record",
    description="Idempotent; called by clients after sign-in.",
)
async def sync_current_user(
    request: UserSyncRequest | None = None,
    identity: CallerIdentity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Return the caller's user, creating it on first access."""
    display_name = (request.display_name if request else None) or identity.name
    user = await UserService().get_or_create_user(
        session, identity.subject, display_name
    )
    return UserResponse.model_validate(user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the caller's user record",
)
async def get_me(user: User = Depends(get_current_user)) -> UserResponse:
    """Return the caller's user with roles."""
    return UserResponse.model_validate(user)


@router.get(
    "/",
    response_model=list[UserResponse],
    summary="List all users",
    dependencies=[Depends(require_admin)],
)
async def list_users(
    session: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    """List all users."""
    users = await UserService().list_users(session)
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/admins",
    response_model=list[UserResponse],
    summary="List admin users",
    dependencies=[Depends(require_admin)],
)
async def list_admins(
    session: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    """List users holding the admin role."""
    users = await UserService().get_admins(session)
    return [UserResponse.model_validate(user) for user in users]


@router.get(
    "/by-external-id/{external_id}",
    response_model=UserResponse | None,
    summary="Get a user by external identity",
    dependencies=[Depends(require_admin)],
)
async def get_user_by_external_id(
    external_id: str,
    session: AsyncSession = Depends(get_db),
) -> UserResponse | None:
    """Return the user for an external identity, or null."""
    user = await UserService().get_by_external_id(session, external_id)
    if user is None:
        return None
    return UserResponse.model_validate(user)


@router.get(
    "/by-external-id/{external_id}/roles/{role}",
    response_model=RoleCheckResponse,
    summary="Check whether a user holds a role",
    dependencies=[Depends(require_admin)],
)
async def check_role(
    external_id: str,
    role: str,
    session: AsyncSession = Depends(get_db),
) -> RoleCheckResponse:
    """Check role membership of a user."""
    has_role = await UserService().has_role(session, external_id, role)
    return RoleCheckResponse(external_id=external_id, role=role, has_role=has_role)


@router.post(
    "/by-external-id/{external_id}/roles",
    response_model=UserResponse,
    summary="Grant a role",
    dependencies=[Depends(require_admin)],
)
async def add_role(
    external_id: str,
    request: RoleRequest,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Grant a role to a user; no-op if already held."""
    user = await UserService().add_role(session, external_id, request.role)
    return UserResponse.model_validate(user)


@router.delete(
    "/by-external-id/{external_id}/roles/{role}",
    response_model=UserResponse,
    summary="Revoke a role",
    dependencies=[Depends(require_admin)],
)
async def remove_role(
    external_id: str,
    role: str,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Revoke a role from a user; no-op if not held."""
    user = await UserService().remove_role(session, external_id, role)
    return UserResponse.model_validate(user)


@router.put(
    "/by-external-id/{external_id}/metadata",
    response_model=UserResponse,
    summary="Replace user metadata",
    dependencies=[Depends(require_admin)],
)
async def update_metadata(
    external_id: str,
    request: MetadataUpdateRequest,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Replace the metadata bag of a user."""
    user = await UserService().update_metadata(
        session, external_id, request.metadata
    )
    return UserResponse.model_validate(user)


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    dependencies=[Depends(require_admin)],
)
async def create_user(
    request: UserCreateRequest,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Create a user with a new external identity."""
    user = await UserService().create_user(session, **request.model_dump())
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
    dependencies=[Depends(require_admin)],
)
async def update_user(
    user_id: int,
    request: UserUpdateRequest,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Replace display name, roles and metadata of a user."""
    user = await UserService().update_user(session, user_id, **request.model_dump())
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
    dependencies=[Depends(require_admin)],
)
async def delete_user(
    user_id: int,
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete a user."""
    await UserService().delete_user(session, user_id)
