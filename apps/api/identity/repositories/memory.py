"""
In-memory repositories.

For unit tests and local development. Data is lost on restart.

The store enforces the same invariants as the database schema: unique
email, unique flag key, unique assignment pair, assignments only between
existing rows, and assignment removal when an endpoint is soft-deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from itertools import count
from typing import Any, Iterator

from identity.core.exceptions import ConstraintViolationError
from identity.models import User, FeatureFlag
from identity.utils.timezone import utc_now
from .interfaces import UserRepository, FeatureFlagRepository, AssignmentRepository


@dataclass
class MemoryStore:
    """Shared state behind the memory repositories."""

    users: dict[int, User] = field(default_factory=dict)
    flags: dict[int, FeatureFlag] = field(default_factory=dict)
    assignments: dict[tuple[int, int], datetime] = field(default_factory=dict)
    _user_ids: Iterator[int] = field(default_factory=lambda: count(1))
    _flag_ids: Iterator[int] = field(default_factory=lambda: count(1))

    def next_user_id(self) -> int:
        return next(self._user_ids)

    def next_flag_id(self) -> int:
        return next(self._flag_ids)

    def drop_assignments(self, *, user_id: int | None = None, flag_id: int | None = None) -> None:
        for pair in list(self.assignments):
            if pair[0] == user_id or pair[1] == flag_id:
                del self.assignments[pair]

    def clear(self) -> None:
        """Clear all data (for tests)."""
        self.users.clear()
        self.flags.clear()
        self.assignments.clear()
        self._user_ids = count(1)
        self._flag_ids = count(1)


def _page(items: list, limit: int, offset: int) -> tuple[list, int]:
    return items[offset:offset + limit], len(items)


class MemoryUserRepository(UserRepository):
    """In-memory user storage."""

    def __init__(self, store: MemoryStore):
        self.store = store

    def _active(self) -> list[User]:
        return [
            u for _, u in sorted(self.store.users.items())
            if not u.is_deleted
        ]

    async def create(self, *, name: str, email: str, enabled: bool = True) -> User:
        # Unique index covers soft-deleted rows too
        if any(u.email == email for u in self.store.users.values()):
            raise ConstraintViolationError("failed to create user: constraint violated")

        now = utc_now()
        user = User(
            id=self.store.next_user_id(),
            name=name,
            email=email,
            enabled=enabled,
            created_at=now,
            updated_at=now,
            deleted_at=None,
            last_login=None,
        )
        self.store.users[user.id] = user
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        user = self.store.users.get(user_id)
        if user is None or user.is_deleted:
            return None
        return user

    async def get_by_email(self, email: str) -> User | None:
        for user in self._active():
            if user.email == email:
                return user
        return None

    async def list(self, *, limit: int, offset: int) -> tuple[list[User], int]:
        return _page(self._active(), limit, offset)

    async def update(self, user: User, **fields: Any) -> User:
        email = fields.get("email")
        if email is not None and any(
            u.email == email and u.id != user.id for u in self.store.users.values()
        ):
            raise ConstraintViolationError("failed to update user: constraint violated")

        for name, value in fields.items():
            if hasattr(user, name):
                setattr(user, name, value)
        user.updated_at = utc_now()
        return user

    async def soft_delete(self, user: User) -> None:
        user.deleted_at = utc_now()
        self.store.drop_assignments(user_id=user.id)


class MemoryFeatureFlagRepository(FeatureFlagRepository):
    """In-memory feature flag storage."""

    def __init__(self, store: MemoryStore):
        self.store = store

    def _active(self) -> list[FeatureFlag]:
        return [
            f for _, f in sorted(self.store.flags.items())
            if not f.is_deleted
        ]

    async def create(
        self,
        *,
        key: str,
        description: str = "",
        enabled: bool = False,
    ) -> FeatureFlag:
        if any(f.key == key for f in self.store.flags.values()):
            raise ConstraintViolationError("failed to create feature flag: constraint violated")

        now = utc_now()
        flag = FeatureFlag(
            id=self.store.next_flag_id(),
            key=key,
            description=description,
            enabled=enabled,
            created_at=now,
            updated_at=now,
            deleted_at=None,
        )
        self.store.flags[flag.id] = flag
        return flag

    async def get_by_id(self, flag_id: int) -> FeatureFlag | None:
        flag = self.store.flags.get(flag_id)
        if flag is None or flag.is_deleted:
            return None
        return flag

    async def get_by_key(self, key: str) -> FeatureFlag | None:
        for flag in self._active():
            if flag.key == key:
                return flag
        return None

    async def list(self, *, limit: int, offset: int) -> tuple[list[FeatureFlag], int]:
        return _page(self._active(), limit, offset)

    async def update(self, flag: FeatureFlag, **fields: Any) -> FeatureFlag:
        for name, value in fields.items():
            if hasattr(flag, name):
                setattr(flag, name, value)
        flag.updated_at = utc_now()
        return flag

    async def soft_delete(self, flag: FeatureFlag) -> None:
        flag.deleted_at = utc_now()
        self.store.drop_assignments(flag_id=flag.id)


class MemoryAssignmentRepository(AssignmentRepository):
    """In-memory user <-> feature flag assignments."""

    def __init__(self, store: MemoryStore):
        self.store = store

    async def assign(self, user_id: int, flag_id: int) -> None:
        pair = (user_id, flag_id)
        if pair in self.store.assignments:
            raise ConstraintViolationError("failed to assign feature flag: constraint violated")
        if user_id not in self.store.users or flag_id not in self.store.flags:
            raise ConstraintViolationError("failed to assign feature flag: constraint violated")
        self.store.assignments[pair] = utc_now()

    async def unassign(self, user_id: int, flag_id: int) -> None:
        self.store.assignments.pop((user_id, flag_id), None)

    async def is_assigned(self, user_id: int, flag_id: int) -> bool:
        return (user_id, flag_id) in self.store.assignments

    async def flags_for_user(self, user_id: int) -> list[FeatureFlag]:
        flag_ids = sorted(f for u, f in self.store.assignments if u == user_id)
        return [
            self.store.flags[fid] for fid in flag_ids
            if not self.store.flags[fid].is_deleted
        ]

    async def users_for_flag(self, flag_id: int) -> list[User]:
        user_ids = sorted(u for u, f in self.store.assignments if f == flag_id)
        return [
            self.store.users[uid] for uid in user_ids
            if not self.store.users[uid].is_deleted
        ]
