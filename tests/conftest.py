import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import AsyncGenerator, Callable, Dict  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.auth.security import create_access_token  # noqa: E402
from app.core.cache import CacheLayer  # noqa: E402
from app.core.enums import AuthorRole  # noqa: E402
from app.core.models import Admin, Enrollment, Forum, Parent, Student, Teacher  # noqa: E402
from app.db.session import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture()
async def engine():
    """One in-memory database per test; StaticPool keeps every session on the same connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite leaves foreign keys (and ON DELETE CASCADE) off unless asked
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override FastAPI dependency."""
    async_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def cache() -> CacheLayer:
    """The application's shared cache, emptied for each test."""
    layer: CacheLayer = app.state.cache
    layer.flush_all()
    yield layer
    layer.flush_all()


@pytest.fixture()
async def client(db_session: AsyncSession, cache: CacheLayer) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
async def people(db_session: AsyncSession) -> Dict[AuthorRole, object]:
    """One row in each person table."""
    admin = Admin(username="root", email="root@example.com")
    teacher = Teacher(name="Grace Hopper", email="grace@example.com", phone="+10000000001")
    parent = Parent(
        father_first_name="Alan",
        father_last_name="Turing",
        father_phone="+10000000002",
        father_email="alan@example.com",
    )
    db_session.add_all([admin, teacher, parent])
    await db_session.flush()
    student = Student(parent_id=parent.id, first_name="Ada", last_name="Lovelace")
    db_session.add(student)
    await db_session.commit()
    return {
        AuthorRole.admin: admin,
        AuthorRole.teacher: teacher,
        AuthorRole.parent: parent,
        AuthorRole.student: student,
    }


@pytest.fixture()
def auth_headers(people) -> Callable[[AuthorRole], Dict[str, str]]:
    """Bearer headers for the seeded person of the given role."""

    def _headers(role: AuthorRole) -> Dict[str, str]:
        token = create_access_token(subject={"sub": str(people[role].id), "role": role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
async def forum(db_session: AsyncSession) -> Forum:
    forum = Forum(name="General", description="Anything goes")
    db_session.add(forum)
    await db_session.commit()
    return forum


@pytest.fixture()
async def enrollment(db_session: AsyncSession, people) -> Enrollment:
    enrollment = Enrollment(student_id=people[AuthorRole.student].id)
    db_session.add(enrollment)
    await db_session.commit()
    return enrollment
