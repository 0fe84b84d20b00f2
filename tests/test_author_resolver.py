import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.author_resolver import resolve_author
from app.core.enums import AuthorRole
from app.core.models import Admin, Teacher


@pytest.mark.asyncio
@pytest.mark.parametrize("role", list(AuthorRole))
async def test_resolves_each_role_in_its_own_table(db_session: AsyncSession, people, role: AuthorRole) -> None:
    assert await resolve_author(db_session, people[role].id, role) is True
    assert await resolve_author(db_session, people[role].id, role.value) is True


@pytest.mark.asyncio
async def test_wrong_role_does_not_match(db_session: AsyncSession, people) -> None:
    teacher_id = people[AuthorRole.teacher].id
    assert await resolve_author(db_session, teacher_id, AuthorRole.student) is False
    assert await resolve_author(db_session, teacher_id, AuthorRole.admin) is False


@pytest.mark.asyncio
async def test_unknown_role_resolves_false(db_session: AsyncSession, people) -> None:
    teacher_id = people[AuthorRole.teacher].id
    assert await resolve_author(db_session, teacher_id, "janitor") is False
    assert await resolve_author(db_session, teacher_id, None) is False


@pytest.mark.asyncio
async def test_missing_id_resolves_false(db_session: AsyncSession) -> None:
    assert await resolve_author(db_session, uuid.uuid4(), AuthorRole.parent) is False


@pytest.mark.asyncio
async def test_colliding_ids_resolve_only_in_the_named_table(db_session: AsyncSession) -> None:
    shared_id = uuid.uuid4()
    db_session.add(Admin(id=shared_id, username="dup", email="dup-admin@example.com"))
    db_session.add(Teacher(id=shared_id, name="Dup", email="dup-teacher@example.com", phone="1"))
    await db_session.commit()

    assert await resolve_author(db_session, shared_id, AuthorRole.admin) is True
    assert await resolve_author(db_session, shared_id, AuthorRole.teacher) is True
    assert await resolve_author(db_session, shared_id, AuthorRole.parent) is False
    assert await resolve_author(db_session, shared_id, AuthorRole.student) is False
