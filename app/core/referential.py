"""
Referential checks run before every forum/payment write.

Each foreign key on the payload must resolve before anything is written. On update the
target row is confirmed first, then only the foreign keys present in the payload are
checked. All checks are read-only; nothing is mutated until every check has passed.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Type
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.author_resolver import resolve_author
from app.core.exceptions import NotFoundError, ServiceError

AUTHOR_PAIR_MESSAGE = "author_id and author_role must be supplied together"


@dataclass(frozen=True)
class Reference:
    """A foreign-key field on a payload and the table it must resolve in."""

    field: str
    model: Type[Any]
    label: str


async def require_exists(db: AsyncSession, model: Type[Any], row_id: UUID, label: str) -> Any:
    # Always hits the store: rows removed by an FK cascade may linger in the identity map
    result = await db.execute(select(model).where(model.id == row_id))
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(f"{label} not found")
    return row


async def require_author(db: AsyncSession, author_id: UUID, author_role: Any) -> None:
    if not await resolve_author(db, author_id, author_role):
        role = getattr(author_role, "value", author_role)
        raise NotFoundError(f"Author with ID {author_id} and role {role} not found")


async def validate_create(
    db: AsyncSession,
    data: Mapping[str, Any],
    references: Sequence[Reference] = (),
    authored: bool = False,
) -> None:
    """Every reference and, for authored entities, the author are mandatory on create."""
    for ref in references:
        await require_exists(db, ref.model, data[ref.field], ref.label)
    if authored:
        await require_author(db, data["author_id"], data["author_role"])


async def validate_update(
    db: AsyncSession,
    model: Type[Any],
    label: str,
    target_id: UUID,
    changes: Dict[str, Any],
    references: Sequence[Reference] = (),
    authored: bool = False,
) -> Any:
    """Confirm the target, then the references present in changes. Returns the target row."""
    target = await require_exists(db, model, target_id, label)
    for ref in references:
        value = changes.get(ref.field)
        if value is not None:
            await require_exists(db, ref.model, value, ref.label)
    if authored:
        await _validate_author_change(db, changes)
    return target


async def _validate_author_change(db: AsyncSession, changes: Dict[str, Any]) -> None:
    author_id: Optional[UUID] = changes.get("author_id")
    author_role = changes.get("author_role")
    if author_id is None and author_role is None:
        return
    if author_id is None or author_role is None:
        raise ServiceError(AUTHOR_PAIR_MESSAGE, status.HTTP_400_BAD_REQUEST)
    await require_author(db, author_id, author_role)
