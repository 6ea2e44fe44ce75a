"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file with foreign keys enforced, so
cascades and RESTRICT behave as on PostgreSQL. Sessions do not share a
connection (NullPool), mirroring one connection per request.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.portfolio.api.dependencies import get_db_session
from src.portfolio.core.config import get_settings
from src.portfolio.core.db import enable_sqlite_foreign_keys
from src.portfolio.core.health import reset_health_cache
from src.portfolio.core.storage import LocalMediaStorage, get_media_storage
from src.portfolio.main import create_app
from src.portfolio.models import User, UserRole
from src.portfolio.repositories import ProjectRepository, SkillRepository, UserRepository
from src.portfolio.services import ProjectService
from tests.helpers import EmailOutbox, create_user


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a file-backed SQLite engine with the full schema."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'portfolio.db'}",
        poolclass=NullPool,
        # Concurrent writers wait for the file lock instead of failing at once
        connect_args={"timeout": 15},
    )
    enable_sqlite_foreign_keys(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for arranging and verifying data.

    Changes must be committed explicitly to be visible to the code under test.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def media_storage() -> LocalMediaStorage:
    """Per-test area inside the directory the app serves as static files."""
    settings = get_settings()
    area = uuid4().hex
    return LocalMediaStorage(
        root=Path(settings.media_root) / area,
        url_prefix=f"{settings.media_url_prefix}/{area}",
        max_bytes=1024 * 1024,
    )


@pytest.fixture
async def service_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Separate session owned by the service under test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def project_service(
    service_session: AsyncSession,
    media_storage: LocalMediaStorage,
    outbox: EmailOutbox,
) -> ProjectService:
    return ProjectService(
        ProjectRepository(service_session),
        SkillRepository(service_session),
        UserRepository(service_session),
        service_session,
        media_storage,
    )


@pytest.fixture
async def member(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.TEAM_MEMBER, first_name="Mia", last_name="Member")


@pytest.fixture
async def other_member(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.TEAM_MEMBER, first_name="Otto", last_name="Other")


@pytest.fixture
async def leader(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.TEAM_LEADER, first_name="Lena", last_name="Leader")


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    media_storage: LocalMediaStorage,
    outbox: EmailOutbox,
) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the app, bound to the per-test database."""
    app = create_app()

    async def _override_db_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_db_session
    app.dependency_overrides[get_media_storage] = lambda: media_storage

    reset_health_cache()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    reset_health_cache()
