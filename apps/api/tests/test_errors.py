"""
Tests for error responses and request logging.
"""

import logging

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from identity.api.dependencies.services import get_user_service
from identity.core.config import settings
from identity.main import app
from identity.repositories import (
    MemoryStore,
    MemoryUserRepository,
    MemoryFeatureFlagRepository,
    MemoryAssignmentRepository,
)
from identity.repositories.base import storage_errors
from identity.services.user import UserService


class BrokenUserRepository(MemoryUserRepository):
    """Fails every list call the way a missing table would."""

    async def list(self, *, limit, offset):
        with storage_errors("list users"):
            raise OperationalError(
                "SELECT count(*) AS count_1 FROM users",
                {},
                Exception("no such table: users"),
            )


class UncheckedAssignmentRepository(MemoryAssignmentRepository):
    """Always reports the pair as unassigned, like a concurrent writer would."""

    async def is_assigned(self, user_id, flag_id):
        return False


def _use_service(service: UserService) -> None:
    app.dependency_overrides[get_user_service] = lambda: service


@pytest.mark.asyncio
async def test_storage_failure_hides_detail(client: AsyncClient, memory_store: MemoryStore):
    _use_service(UserService(
        users=BrokenUserRepository(memory_store),
        flags=MemoryFeatureFlagRepository(memory_store),
        assignments=MemoryAssignmentRepository(memory_store),
    ))

    response = await client.get("/api/v1/users")

    assert response.status_code == 500
    assert response.json() == {
        "error": "internal_error",
        "message": "An error occurred",
    }


@pytest.mark.asyncio
async def test_storage_failure_detail_in_debug(
    client: AsyncClient,
    memory_store: MemoryStore,
    monkeypatch,
):
    monkeypatch.setattr(settings, "debug", True)
    _use_service(UserService(
        users=BrokenUserRepository(memory_store),
        flags=MemoryFeatureFlagRepository(memory_store),
        assignments=MemoryAssignmentRepository(memory_store),
    ))

    response = await client.get("/api/v1/users")

    assert response.status_code == 500
    assert response.json()["message"].startswith("failed to list users")


@pytest.mark.asyncio
async def test_assign_race_is_constraint_violation(
    client: AsyncClient,
    memory_store: MemoryStore,
):
    users = MemoryUserRepository(memory_store)
    flags = MemoryFeatureFlagRepository(memory_store)
    user = await users.create(name="Ann", email="ann@x.io")
    await flags.create(key="beta")
    _use_service(UserService(
        users=users,
        flags=flags,
        assignments=UncheckedAssignmentRepository(memory_store),
    ))

    url = f"/api/v1/users/{user.id}/feature-flags/beta"
    response = await client.post(url)
    assert response.status_code == 200

    response = await client.post(url)
    assert response.status_code == 409
    assert response.json()["error"] == "constraint_violation"


@pytest.mark.asyncio
async def test_request_completed_is_logged(client: AsyncClient, caplog):
    with caplog.at_level(logging.INFO, logger="identity.api.middleware.logging"):
        response = await client.get("/health")

    assert response.status_code == 200
    records = [r for r in caplog.records if r.getMessage() == "Request completed"]
    assert len(records) == 1
    assert records[0].method == "GET"
    assert records[0].path == "/health"
    assert records[0].status == 200
