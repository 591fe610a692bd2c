"""
Repository interfaces.

Services depend on these contracts only. Implementations:
- Database*Repository: SQLAlchemy (PostgreSQL in production)
- Memory*Repository: in-process store for tests and local development

Every read excludes soft-deleted rows. Storage failures surface as
ConstraintViolationError (integrity) or InternalError (anything else).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from identity.models import User, FeatureFlag


class UserRepository(ABC):
    """Storage for users."""

    @abstractmethod
    async def create(self, *, name: str, email: str, enabled: bool = True) -> User:
        """Insert a user. Raises ConstraintViolationError on duplicate email."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> User | None:
        """Get an active user by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get an active user by exact email."""
        pass

    @abstractmethod
    async def list(self, *, limit: int, offset: int) -> tuple[list[User], int]:
        """Page of active users ordered by ID, plus the total count."""
        pass

    @abstractmethod
    async def update(self, user: User, **fields: Any) -> User:
        """Apply the given fields and persist."""
        pass

    @abstractmethod
    async def soft_delete(self, user: User) -> None:
        """Mark the user deleted and drop its assignments."""
        pass


class FeatureFlagRepository(ABC):
    """Storage for feature flags."""

    @abstractmethod
    async def create(
        self,
        *,
        key: str,
        description: str = "",
        enabled: bool = False,
    ) -> FeatureFlag:
        """Insert a flag. Raises ConstraintViolationError on duplicate key."""
        pass

    @abstractmethod
    async def get_by_id(self, flag_id: int) -> FeatureFlag | None:
        """Get an active flag by ID."""
        pass

    @abstractmethod
    async def get_by_key(self, key: str) -> FeatureFlag | None:
        """Get an active flag by key."""
        pass

    @abstractmethod
    async def list(self, *, limit: int, offset: int) -> tuple[list[FeatureFlag], int]:
        """Page of active flags ordered by ID, plus the total count."""
        pass

    @abstractmethod
    async def update(self, flag: FeatureFlag, **fields: Any) -> FeatureFlag:
        """Apply the given fields and persist."""
        pass

    @abstractmethod
    async def soft_delete(self, flag: FeatureFlag) -> None:
        """Mark the flag deleted and drop its assignments."""
        pass


class AssignmentRepository(ABC):
    """
    Reads and writes of the user <-> feature flag relation.
    """

    @abstractmethod
    async def assign(self, user_id: int, flag_id: int) -> None:
        """
        Insert one assignment.

        Raises ConstraintViolationError if the pair already exists or
        either endpoint does not exist.
        """
        pass

    @abstractmethod
    async def unassign(self, user_id: int, flag_id: int) -> None:
        """Delete the assignment if present. Absent pairs are not an error."""
        pass

    @abstractmethod
    async def is_assigned(self, user_id: int, flag_id: int) -> bool:
        """Check whether the pair is assigned."""
        pass

    @abstractmethod
    async def flags_for_user(self, user_id: int) -> list[FeatureFlag]:
        """Active flags assigned to a user, ordered by flag ID."""
        pass

    @abstractmethod
    async def users_for_flag(self, flag_id: int) -> list[User]:
        """Active users holding a flag, ordered by user ID."""
        pass
