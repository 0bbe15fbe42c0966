"""Pytest fixtures for testing."""
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from token_quota.main import app
from token_quota.common.database import build_engine, build_session_maker, create_tables, get_db
from token_quota.common.rate_limit import limiter
from token_quota.common.time_utils import get_timestamp
from token_quota.domain.auth_service import hash_password
from token_quota.domain.key_service import generate_key
from token_quota.models.user import User, UserRole, UserStatus
from token_quota.repository.user_repository import UserRepository
from token_quota.models.token import Token, TokenStatus


TEST_PASSWORD = "password123"


@pytest.fixture(scope="function")
async def test_db(tmp_path):
    """Create a fresh SQLite database file with all tables."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    session_maker = build_session_maker(engine)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Disable rate limiting in tests
    limiter.enabled = False

    yield session_maker

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def client(test_db) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
async def session(test_db) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with test_db() as session:
        yield session


@pytest.fixture
async def create_user(test_db):
    """Factory to create users in their own session."""
    async def _create_user(
        username: str,
        role: int = UserRole.COMMON,
        status: int = UserStatus.ENABLED,
        password: str = TEST_PASSWORD,
    ) -> User:
        async with test_db() as own_session:
            async with own_session.begin():
                user = await UserRepository(own_session).create(
                    username=username,
                    password_hash=hash_password(password),
                    role=role,
                    status=status,
                )
        return user

    return _create_user


@pytest.fixture
async def user_a(create_user) -> User:
    """Enabled common user."""
    return await create_user("user_a")


@pytest.fixture
async def disabled_user(create_user) -> User:
    """Disabled common user."""
    return await create_user("disabled_user", status=UserStatus.DISABLED)


@pytest.fixture
async def admin_user(create_user) -> User:
    """Enabled admin user."""
    return await create_user("admin", role=UserRole.ADMIN)


@pytest.fixture
async def create_token(test_db):
    """Factory to insert tokens directly, bypassing the API."""
    async def _create_token(
        user_id: int,
        remain_quota: int = 0,
        name: str = "Test Token",
        status: int = TokenStatus.ENABLED,
        used_quota: int = 0,
    ) -> Token:
        now = get_timestamp()
        token = Token(
            user_id=user_id,
            name=name,
            key=generate_key(),
            status=status,
            created_time=now,
            accessed_time=now,
            expired_time=-1,
            remain_quota=remain_quota,
            used_quota=used_quota,
            group="default",
        )
        async with test_db() as own_session:
            own_session.add(token)
            await own_session.commit()
            await own_session.refresh(token)
        return token

    return _create_token


@pytest.fixture
def read_token(test_db):
    """Read a token in a fresh session so no stale identity map is involved."""
    async def _read_token(token_id: int) -> Token | None:
        async with test_db() as fresh:
            return await fresh.get(Token, token_id)

    return _read_token
