"""
Shared create/list/get/update/delete flow for forum and payment entities.

Writes: referential checks -> single-statement store mutation -> cache invalidation.
Reads: cache lookup -> store query on miss -> cache populate.
Invalidation runs after the commit, so a concurrent reader can briefly repopulate a list
with pre-write rows; that window is bounded by the cache TTL.
"""

from typing import Any, ClassVar, FrozenSet, List, Optional, Sequence, Type
from uuid import UUID

import structlog
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheKeys, CacheLayer
from app.core.exceptions import NotFoundError, ServiceError
from app.core.referential import Reference, require_exists, validate_create, validate_update
from app.db.session import utc_now

log = structlog.get_logger()


class EntityService:
    """One instance per entity type, sharing the process cache handed in at construction."""

    model: ClassVar[Type[Any]]
    response_model: ClassVar[Type[BaseModel]]
    label: ClassVar[str]  # "Topic", used in NotFound messages
    namespace: ClassVar[str]  # cache namespace and log event prefix
    references: ClassVar[Sequence[Reference]] = ()
    # Column used by list(parent_id=...)
    parent_field: ClassVar[Optional[str]] = None
    order_by: ClassVar[Any] = None
    authored: ClassVar[bool] = False
    # Fields an update may explicitly set to null
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()
    # Namespaces whose rows the store cascades away when a row of this entity is deleted
    dependent_namespaces: ClassVar[Sequence[str]] = ()

    def __init__(self, cache: CacheLayer) -> None:
        self.cache = cache

    @property
    def entity(self) -> str:
        return self.label.lower()

    def to_response(self, row: Any) -> BaseModel:
        return self.response_model.model_validate(row)

    def _invalidate(self, row_id: Optional[UUID] = None, cascade: bool = False) -> None:
        self.cache.delete_by_prefix(CacheKeys.list_prefix(self.namespace))
        if row_id is not None:
            self.cache.delete(CacheKeys.item_key(self.namespace, row_id))
        if cascade:
            for namespace in self.dependent_namespaces:
                self.cache.delete_by_prefix(CacheKeys.namespace_prefix(namespace))

    async def create(self, db: AsyncSession, payload: BaseModel) -> Any:
        data = payload.model_dump()
        try:
            await validate_create(db, data, self.references, self.authored)
            row = self.model(**data)
            db.add(row)
            await db.commit()
            await db.refresh(row)
        except ServiceError as exc:
            log.warning(f"{self.entity}.create_rejected", reason=exc.message)
            raise
        except SQLAlchemyError:
            await db.rollback()
            log.error(f"{self.entity}.create_failed", exc_info=True)
            raise
        self._invalidate()
        log.info(f"{self.entity}.created", id=str(row.id))
        return self.to_response(row)

    async def list(self, db: AsyncSession, parent_id: Optional[UUID] = None) -> List[Any]:
        async def _load() -> List[Any]:
            stmt = select(self.model)
            if parent_id is not None and self.parent_field is not None:
                stmt = stmt.where(getattr(self.model, self.parent_field) == parent_id)
            if self.order_by is not None:
                stmt = stmt.order_by(self.order_by)
            try:
                result = await db.execute(stmt)
            except SQLAlchemyError:
                log.error(f"{self.entity}.list_failed", parent_id=str(parent_id), exc_info=True)
                raise
            return [self.to_response(r) for r in result.scalars().all()]

        rows = await self.cache.with_cache(CacheKeys.list_key(self.namespace, parent_id), _load)
        return list(rows)

    async def get(self, db: AsyncSession, row_id: UUID) -> Any:
        async def _load() -> Any:
            try:
                row = await require_exists(db, self.model, row_id, self.label)
            except SQLAlchemyError:
                log.error(f"{self.entity}.get_failed", id=str(row_id), exc_info=True)
                raise
            return self.to_response(row)

        return await self.cache.with_cache(CacheKeys.item_key(self.namespace, row_id), _load)

    async def update(self, db: AsyncSession, row_id: UUID, payload: BaseModel) -> Any:
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in self.nullable_fields
        }
        try:
            row = await validate_update(
                db, self.model, self.label, row_id, changes, self.references, self.authored
            )
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = utc_now()
            await db.commit()
            await db.refresh(row)
        except ServiceError as exc:
            log.warning(f"{self.entity}.update_rejected", id=str(row_id), reason=exc.message)
            raise
        except SQLAlchemyError:
            await db.rollback()
            log.error(f"{self.entity}.update_failed", id=str(row_id), exc_info=True)
            raise
        self._invalidate(row_id)
        log.info(f"{self.entity}.updated", id=str(row_id))
        return self.to_response(row)

    async def delete(self, db: AsyncSession, row_id: UUID) -> None:
        """Remove one row. The store cascades to children; their cached entries are dropped here."""
        try:
            row = await require_exists(db, self.model, row_id, self.label)
            await db.delete(row)
            await db.commit()
        except NotFoundError as exc:
            log.warning(f"{self.entity}.delete_rejected", id=str(row_id), reason=exc.message)
            raise
        except SQLAlchemyError:
            await db.rollback()
            log.error(f"{self.entity}.delete_failed", id=str(row_id), exc_info=True)
            raise
        self._invalidate(row_id, cascade=True)
        log.info(f"{self.entity}.deleted", id=str(row_id))
