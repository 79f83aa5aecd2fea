"""Caller identity resolution and role checks.

The identity provider issues signed bearer tokens; only the ``sub`` claim
is used, as the natural key of the domain user. Requests without a token
have no identity, which some read endpoints accept.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.config import settings
from examprep.db import get_db
from examprep.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError
from examprep.models.user import ADMIN_ROLE, User
from examprep.repositories.user import UserRepository

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CallerIdentity:
    """Who is calling, as asserted by the identity provider."""

    subject: str
    name: str | None = None


class IdentityGateway:
    """Verify and issue identity bearer tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
    ) -> None:
        self.secret_key = secret_key or settings.auth_secret_key
        self.algorithm = algorithm or settings.auth_algorithm

    def resolve(self, token: str) -> CallerIdentity:
        """Decode a bearer token into the caller identity.

        Raises:
            UnauthenticatedError: If the token is invalid, expired or has no subject
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            logger.warning("Rejected bearer token", reason=str(e))
            raise UnauthenticatedError("Invalid or expired token") from e

        subject = payload.get("sub")
        if not subject:
            raise UnauthenticatedError("Token has no subject")
        return CallerIdentity(subject=str(subject), name=payload.get("name"))

    def issue_token(
        self,
        subject: str,
        name: str | None = None,
        ttl_minutes: int = 120,
    ) -> str:
        """Sign a token for a subject (development and test tooling)."""
        now = datetime.now(UTC)
        payload = {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=ttl_minutes)).timestamp()),
        }
        if name:
            payload["name"] = name
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)


async def get_caller_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CallerIdentity | None:
    """Resolve the caller identity, or None when no credential was sent."""
    if credentials is None:
        return None
    return IdentityGateway().resolve(credentials.credentials)


async def require_identity(
    identity: CallerIdentity | None = Depends(get_caller_identity),
) -> CallerIdentity:
    """Resolve the caller identity, failing when there is none."""
    if identity is None:
        raise UnauthenticatedError()
    return identity


async def get_current_user(
    identity: CallerIdentity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Load the domain user of the caller."""
    user = await UserRepository.get_by_external_id(session, identity.subject)
    if user is None:
        raise NotFoundError(resource="User", resource_id=identity.subject)
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only callers holding the admin role."""
    if ADMIN_ROLE not in user.roles:
        logger.warning("Admin access denied", user_id=user.id)
        raise ForbiddenError(ADMIN_ROLE)
    return user
