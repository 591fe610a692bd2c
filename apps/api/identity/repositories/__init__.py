"""
Repository pattern for data access.
"""

from identity.repositories.interfaces import (
    UserRepository,
    FeatureFlagRepository,
    AssignmentRepository,
)
from identity.repositories.base import BaseRepository, SoftDeleteRepository, storage_errors
from identity.repositories.database import (
    DatabaseUserRepository,
    DatabaseFeatureFlagRepository,
    DatabaseAssignmentRepository,
)
from identity.repositories.memory import (
    MemoryStore,
    MemoryUserRepository,
    MemoryFeatureFlagRepository,
    MemoryAssignmentRepository,
)

__all__ = [
    # Interfaces
    "UserRepository",
    "FeatureFlagRepository",
    "AssignmentRepository",
    # SQLAlchemy
    "BaseRepository",
    "SoftDeleteRepository",
    "storage_errors",
    "DatabaseUserRepository",
    "DatabaseFeatureFlagRepository",
    "DatabaseAssignmentRepository",
    # In-memory
    "MemoryStore",
    "MemoryUserRepository",
    "MemoryFeatureFlagRepository",
    "MemoryAssignmentRepository",
]
