"""
Resolve a polymorphic author. author_role picks which of the four person tables
author_id must exist in; ids colliding across tables never match cross-role.
"""

from typing import Awaitable, Callable, Dict, Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import AuthorRole
from app.core.models import Admin, Parent, Student, Teacher


async def _admin_exists(db: AsyncSession, person_id: UUID) -> bool:
    result = await db.execute(select(Admin.id).where(Admin.id == person_id).limit(1))
    return result.scalar_one_or_none() is not None


async def _teacher_exists(db: AsyncSession, person_id: UUID) -> bool:
    result = await db.execute(select(Teacher.id).where(Teacher.id == person_id).limit(1))
    return result.scalar_one_or_none() is not None


async def _parent_exists(db: AsyncSession, person_id: UUID) -> bool:
    result = await db.execute(select(Parent.id).where(Parent.id == person_id).limit(1))
    return result.scalar_one_or_none() is not None


async def _student_exists(db: AsyncSession, person_id: UUID) -> bool:
    result = await db.execute(select(Student.id).where(Student.id == person_id).limit(1))
    return result.scalar_one_or_none() is not None


AUTHOR_LOOKUPS: Dict[AuthorRole, Callable[[AsyncSession, UUID], Awaitable[bool]]] = {
    AuthorRole.admin: _admin_exists,
    AuthorRole.teacher: _teacher_exists,
    AuthorRole.parent: _parent_exists,
    AuthorRole.student: _student_exists,
}


def _normalize_role(role: Union[AuthorRole, str, None]) -> Optional[AuthorRole]:
    if isinstance(role, AuthorRole):
        return role
    try:
        return AuthorRole(role)
    except ValueError:
        return None


async def resolve_author(
    db: AsyncSession,
    author_id: UUID,
    role: Union[AuthorRole, str, None],
) -> bool:
    """
    True iff a row with author_id exists in the table selected by role.
    Unknown roles resolve to False. Store errors propagate to the caller.
    """
    author_role = _normalize_role(role)
    if author_role is None:
        return False
    return await AUTHOR_LOOKUPS[author_role](db, author_id)
