"""
Tests for the SQLAlchemy repositories.
"""

import pytest
from sqlalchemy import select, func

from identity.core.exceptions import ConstraintViolationError
from identity.models import User, FeatureFlag, UserFeatureFlag
from identity.repositories import (
    DatabaseUserRepository,
    DatabaseFeatureFlagRepository,
    DatabaseAssignmentRepository,
)


async def _assignment_count(repo: DatabaseAssignmentRepository) -> int:
    return await repo.db.scalar(select(func.count()).select_from(UserFeatureFlag))


@pytest.mark.asyncio
async def test_create_user_sets_timestamps(user_repo: DatabaseUserRepository):
    user = await user_repo.create(name="Ann", email="ann@x.io")

    assert user.id is not None
    assert user.enabled is True
    assert user.created_at is not None
    assert user.updated_at >= user.created_at
    assert user.deleted_at is None
    assert user.last_login is None


@pytest.mark.asyncio
async def test_get_by_email(user_repo: DatabaseUserRepository, test_user: User):
    found = await user_repo.get_by_email("ann@example.com")
    assert found is not None
    assert found.id == test_user.id

    assert await user_repo.get_by_email("nobody@example.com") is None


@pytest.mark.asyncio
async def test_list_orders_by_id_and_counts(user_repo: DatabaseUserRepository, user_factory):
    created = [await user_factory.create() for _ in range(5)]

    users, total = await user_repo.list(limit=2, offset=2)

    assert total == 5
    assert [u.id for u in users] == [u.id for u in created[2:4]]


@pytest.mark.asyncio
async def test_soft_deleted_user_is_hidden(user_repo: DatabaseUserRepository, test_user: User):
    await user_repo.soft_delete(test_user)

    assert test_user.deleted_at is not None
    assert await user_repo.get_by_id(test_user.id) is None
    assert await user_repo.get_by_email(test_user.email) is None

    users, total = await user_repo.list(limit=10, offset=0)
    assert users == []
    assert total == 0

    # The row itself is kept
    row = await user_repo.db.get(User, test_user.id)
    assert row is not None


@pytest.mark.asyncio
async def test_update_user(user_repo: DatabaseUserRepository, test_user: User):
    updated = await user_repo.update(test_user, name="Ann B", enabled=False)

    assert updated.name == "Ann B"
    assert updated.enabled is False
    assert updated.email == "ann@example.com"


@pytest.mark.asyncio
async def test_flag_get_by_key(flag_repo: DatabaseFeatureFlagRepository, test_flag: FeatureFlag):
    found = await flag_repo.get_by_key("beta")
    assert found is not None
    assert found.id == test_flag.id
    assert found.enabled is False

    await flag_repo.soft_delete(test_flag)
    assert await flag_repo.get_by_key("beta") is None


@pytest.mark.asyncio
async def test_assign_and_query_both_directions(
    assignment_repo: DatabaseAssignmentRepository,
    user_factory,
    flag_factory,
):
    ann = await user_factory.create(name="Ann")
    bob = await user_factory.create(name="Bob")
    beta = await flag_factory.create(key="beta")
    dark = await flag_factory.create(key="dark_mode")

    await assignment_repo.assign(ann.id, dark.id)
    await assignment_repo.assign(ann.id, beta.id)
    await assignment_repo.assign(bob.id, beta.id)

    assert await assignment_repo.is_assigned(ann.id, beta.id)
    assert not await assignment_repo.is_assigned(bob.id, dark.id)

    flags = await assignment_repo.flags_for_user(ann.id)
    assert [f.key for f in flags] == ["beta", "dark_mode"]

    users = await assignment_repo.users_for_flag(beta.id)
    assert [u.id for u in users] == [ann.id, bob.id]


@pytest.mark.asyncio
async def test_unassign_is_idempotent(
    assignment_repo: DatabaseAssignmentRepository,
    test_user: User,
    test_flag: FeatureFlag,
):
    await assignment_repo.assign(test_user.id, test_flag.id)

    await assignment_repo.unassign(test_user.id, test_flag.id)
    await assignment_repo.unassign(test_user.id, test_flag.id)

    assert not await assignment_repo.is_assigned(test_user.id, test_flag.id)


@pytest.mark.asyncio
async def test_soft_delete_user_removes_its_assignments(
    user_repo: DatabaseUserRepository,
    assignment_repo: DatabaseAssignmentRepository,
    user_factory,
    test_flag: FeatureFlag,
):
    ann = await user_factory.create()
    bob = await user_factory.create()
    await assignment_repo.assign(ann.id, test_flag.id)
    await assignment_repo.assign(bob.id, test_flag.id)

    await user_repo.soft_delete(ann)

    assert await _assignment_count(assignment_repo) == 1
    users = await assignment_repo.users_for_flag(test_flag.id)
    assert [u.id for u in users] == [bob.id]


@pytest.mark.asyncio
async def test_soft_delete_flag_removes_its_assignments(
    flag_repo: DatabaseFeatureFlagRepository,
    assignment_repo: DatabaseAssignmentRepository,
    test_user: User,
    flag_factory,
):
    beta = await flag_factory.create()
    dark = await flag_factory.create()
    await assignment_repo.assign(test_user.id, beta.id)
    await assignment_repo.assign(test_user.id, dark.id)

    await flag_repo.soft_delete(beta)

    assert await _assignment_count(assignment_repo) == 1
    flags = await assignment_repo.flags_for_user(test_user.id)
    assert [f.id for f in flags] == [dark.id]


@pytest.mark.asyncio
async def test_duplicate_email_is_constraint_violation(
    user_repo: DatabaseUserRepository,
    test_user: User,
):
    with pytest.raises(ConstraintViolationError):
        await user_repo.create(name="Other", email=test_user.email)


@pytest.mark.asyncio
async def test_duplicate_assignment_is_constraint_violation(
    assignment_repo: DatabaseAssignmentRepository,
    test_user: User,
    test_flag: FeatureFlag,
):
    await assignment_repo.assign(test_user.id, test_flag.id)

    with pytest.raises(ConstraintViolationError):
        await assignment_repo.assign(test_user.id, test_flag.id)


@pytest.mark.asyncio
async def test_assign_to_missing_user_is_constraint_violation(
    assignment_repo: DatabaseAssignmentRepository,
    test_flag: FeatureFlag,
):
    with pytest.raises(ConstraintViolationError):
        await assignment_repo.assign(999, test_flag.id)
