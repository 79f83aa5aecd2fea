"""Shared fixtures: in-memory database, API client and signed-in users."""

import os

os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from examprep.auth import CallerIdentity, IdentityGateway  # noqa: E402
from examprep.db import get_db  # noqa: E402
from examprep.main import app  # noqa: E402
from examprep.models import Base, User  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_SUBJECT = "user_admin"
STUDENT_SUBJECT = "user_student"


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    """SQLite only enforces foreign keys when asked to, per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def test_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(test_engine):
    """Create the session factory."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    """Create a test session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """API client whose requests each run in their own database session."""

    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(subject: str, name: str | None = None) -> dict[str, str]:
    """Bearer headers for a signed-in subject."""
    token = IdentityGateway().issue_token(subject, name=name)
    return {"Authorization": f"Bearer {token}"}


async def _create_user(session_factory, external_id: str, roles: list[str]) -> User:
    async with session_factory() as session:
        user = User(external_id=external_id, display_name=external_id, roles=roles)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest.fixture
async def admin_user(session_factory) -> User:
    """A persisted user holding the admin role."""
    return await _create_user(session_factory, ADMIN_SUBJECT, ["admin"])


@pytest.fixture
async def student_user(session_factory) -> User:
    """A persisted user without roles."""
    return await _create_user(session_factory, STUDENT_SUBJECT, [])


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    """Bearer headers for the admin user."""
    return auth_headers(admin_user.external_id)


@pytest.fixture
def student_headers(student_user: User) -> dict[str, str]:
    """Bearer headers for the student user."""
    return auth_headers(student_user.external_id)


@pytest.fixture
def student_identity(student_user: User) -> CallerIdentity:
    """Caller identity of the student user."""
    return CallerIdentity(subject=student_user.external_id)


@pytest.fixture
def make_auth_headers():
    """Factory for bearer headers of arbitrary subjects."""
    return auth_headers
