"""
Base SQLAlchemy repository with common CRUD operations.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TypeVar, Generic, Type, Any, Iterator
from sqlalchemy import Select, select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from identity.core.exceptions import ConstraintViolationError, InternalError
from identity.models.base import Base
from identity.utils.timezone import utc_now

ModelT = TypeVar("ModelT", bound=Base)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """
    Translate SQLAlchemy failures into domain errors.

    Usage:
        with storage_errors("create user"):
            await self.db.flush()
    """
    try:
        yield
    except IntegrityError as exc:
        raise ConstraintViolationError(f"failed to {action}: constraint violated") from exc
    except SQLAlchemyError as exc:
        raise InternalError(f"failed to {action}: {exc}") from exc


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing common CRUD operations.

    Usage:
        class DatabaseUserRepository(BaseRepository[User]):
            model = User

        repo = DatabaseUserRepository(db)
        user = await repo.get_by_id(user_id)
        users, total = await repo.list(limit=10, offset=0)
    """

    model: Type[ModelT]
    entity_name: str = "entity"

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self) -> Select:
        """Base query - override to add default filters (e.g., soft delete)."""
        return select(self.model)

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get entity by ID."""
        stmt = self._base_query().where(self.model.id == id)
        with storage_errors(f"get {self.entity_name}"):
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()

    async def get_one(self, **filters: Any) -> ModelT | None:
        """Get single entity by filters."""
        stmt = self._base_query()
        for field, value in filters.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        with storage_errors(f"get {self.entity_name}"):
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()

    async def list(self, *, limit: int, offset: int) -> tuple[list[ModelT], int]:
        """Page of entities ordered by ID, plus the total count."""
        stmt = self._base_query()

        with storage_errors(f"list {self.entity_name}s"):
            count_stmt = select(func.count()).select_from(stmt.subquery())
            total = await self.db.scalar(count_stmt) or 0

            stmt = stmt.order_by(self.model.id).offset(offset).limit(limit)
            result = await self.db.execute(stmt)
            items = list(result.scalars().all())

        return items, total

    async def create(self, **data: Any) -> ModelT:
        """Create new entity."""
        entity = self.model(**data)
        with storage_errors(f"create {self.entity_name}"):
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)
        return entity

    async def update(self, entity: ModelT, **data: Any) -> ModelT:
        """Apply fields to a loaded entity and persist."""
        for field, value in data.items():
            if hasattr(entity, field):
                setattr(entity, field, value)

        with storage_errors(f"update {self.entity_name}"):
            await self.db.flush()
            await self.db.refresh(entity)
        return entity


class SoftDeleteRepository(BaseRepository[ModelT]):
    """
    Repository that hides soft-deleted entities from every read.

    Usage:
        class DatabaseUserRepository(SoftDeleteRepository[User]):
            model = User
    """

    def _base_query(self) -> Select:
        """Exclude soft-deleted entities by default."""
        return select(self.model).where(self.model.deleted_at.is_(None))

    async def soft_delete(self, entity: ModelT) -> None:
        """Mark entity deleted and run the cascade hook."""
        entity.deleted_at = utc_now()
        with storage_errors(f"delete {self.entity_name}"):
            await self._cascade_soft_delete(entity)
            await self.db.flush()

    async def _cascade_soft_delete(self, entity: ModelT) -> None:
        """Remove rows that depend on a soft-deleted entity."""
        pass
