"""
Pytest configuration and fixtures for testing
"""
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", "")
os.environ.pop("IDENTITY_PROVIDER_API_URL", None)

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from auth import get_role_resolver
from auth_utils import create_jwt
from backend.auth.user import Role
from backend.utils.errors import IdentityProviderUnavailable
from database import Base, get_db
from main import app

# In-memory SQLite database, one per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_ID = "user_admin"


class FakeRoleResolver:
    """Role lookups without the network; records every user id it was asked about."""

    def __init__(self, admin_ids=()):
        self.admin_ids = set(admin_ids)
        self.calls = []
        self.unavailable = False

    async def role_of(self, user_id):
        self.calls.append(user_id)
        if self.unavailable:
            raise IdentityProviderUnavailable()
        return Role.ADMIN if user_id in self.admin_ids else Role.MEMBER


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        # Import models to ensure they're registered with Base
        import database_models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
async def file_session_factory(tmp_path):
    """
    Sessions on a file-backed SQLite database, for tests where concurrent
    sessions need connections of their own.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'todos.db'}", echo=False)
    async with engine.begin() as conn:
        import database_models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest.fixture
async def test_db(session_factory):
    """
    Fixture that provides an isolated, in-memory SQLite session for each test.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@pytest.fixture
def role_resolver():
    return FakeRoleResolver(admin_ids={ADMIN_ID})


@pytest.fixture
async def client(session_factory, role_resolver):
    """
    Async HTTP client against the app with the test database and a fake
    role resolver swapped in.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_role_resolver] = lambda: role_resolver

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a valid session token for a user id."""
    def _headers(user_id):
        return {"Authorization": f"Bearer {create_jwt(user_id)}"}
    return _headers
