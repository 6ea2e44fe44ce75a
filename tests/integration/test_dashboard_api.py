"""HTTP tests for dashboard counters and the health endpoint."""

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.portfolio.core.db import dispose_engine
from src.portfolio.models import User, UserRole
from tests.helpers import auth_headers, create_project

pytestmark = pytest.mark.integration


async def test_public_overview(client: AsyncClient, db_session: AsyncSession, member: User):
    await create_project(db_session, member, status="approved")
    await create_project(db_session, member, status="pending")

    response = await client.get("/api/v1/dashboard/public")

    assert response.status_code == 200
    assert response.json() == {"member_count": 1, "total_projects": 2}


async def test_moderator_dashboard(
    client: AsyncClient, db_session: AsyncSession, member: User, leader: User
):
    await create_project(db_session, member, status="pending")
    await create_project(db_session, member, status="pending")
    await create_project(db_session, member, status="rejected")

    response = await client.get(
        "/api/v1/dashboard", headers=auth_headers(leader.id, UserRole.TEAM_LEADER)
    )

    assert response.status_code == 200
    assert response.json() == {"member_count": 2, "total_projects": 3, "pending_projects": 2}


async def test_dashboard_requires_moderator(client: AsyncClient):
    response = await client.get(
        "/api/v1/dashboard", headers=auth_headers(uuid4(), UserRole.TEAM_MEMBER)
    )

    assert response.status_code == 403
    assert response.json()["request_id"] is not None


async def test_request_id_is_echoed(client: AsyncClient):
    request_id = str(uuid4())
    response = await client.get(
        f"/api/v1/projects/public/{uuid4()}", headers={"X-Request-ID": request_id}
    )

    assert response.status_code == 404
    assert response.headers["X-Request-ID"] == request_id
    assert response.json()["request_id"] == request_id


class TestHealth:
    @pytest.fixture(autouse=True)
    async def _dispose_global_engine(self) -> AsyncGenerator[None]:
        yield
        await dispose_engine()

    async def test_healthy(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "healthy"
        assert response.json()["cached"] is False

    async def test_cached_on_second_call(self, client: AsyncClient):
        await client.get("/health")
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["cached"] is True
