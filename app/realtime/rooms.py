"""
Who may follow which notification room.

  notifications:<user_id>   only that user
  enrollment:<id>           admins, and the parent of the enrolled student
  forum:<id>, topic:<id>, post:<id>   any authenticated person
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentUser
from app.core.enums import AuthorRole
from app.core.models import Enrollment, Student
from app.realtime.notifications import user_room

OPEN_ROOM_KINDS = frozenset({"forum", "topic", "post"})


async def _parent_owns_enrollment(db: AsyncSession, parent_id: UUID, enrollment_id: UUID) -> bool:
    stmt = (
        select(Enrollment.id)
        .join(Student, Student.id == Enrollment.student_id)
        .where(Enrollment.id == enrollment_id, Student.parent_id == parent_id)
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None


async def can_join_room(db: AsyncSession, user: CurrentUser, room: str) -> bool:
    kind, _, ident = room.partition(":")
    if not ident:
        return False
    if kind == "notifications":
        return room == user_room(user.id)
    if kind in OPEN_ROOM_KINDS:
        return True
    if kind == "enrollment":
        if user.role == AuthorRole.admin:
            return True
        if user.role != AuthorRole.parent:
            return False
        try:
            enrollment_id = UUID(ident)
        except ValueError:
            return False
        return await _parent_owns_enrollment(db, user.id, enrollment_id)
    return False
