"""
Seed a local database with one person per role, an enrollment and a forum,
then print an access token for each person.

Run from project root (with DATABASE_URL and JWT_SECRET_KEY in .env):

  python -m app.db.seed_dev_data
"""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.security import create_access_token
from app.core.enums import AuthorRole
from app.core.models import Admin, Enrollment, Forum, Parent, Student, Teacher
from app.db.session import AsyncSessionLocal, Base, engine


async def seed_dev_data(db: AsyncSession) -> None:
    admin = (await db.execute(select(Admin).where(Admin.username == "admin"))).scalar_one_or_none()
    if admin is not None:
        print("Dev data already present, printing tokens only.")
        teacher = (await db.execute(select(Teacher).limit(1))).scalar_one()
        parent = (await db.execute(select(Parent).limit(1))).scalar_one()
        student = (await db.execute(select(Student).limit(1))).scalar_one()
    else:
        admin = Admin(username="admin", email="admin@example.com")
        teacher = Teacher(name="Ada Teacher", email="ada@example.com", phone="+10000000001")
        parent = Parent(
            father_first_name="Pat",
            father_last_name="Parent",
            father_phone="+10000000002",
            father_email="pat@example.com",
        )
        db.add_all([admin, teacher, parent])
        await db.flush()

        student = Student(parent_id=parent.id, first_name="Sam", last_name="Student")
        db.add(student)
        await db.flush()

        enrollment = Enrollment(student_id=student.id)
        forum = Forum(name="General", description="School-wide discussion")
        db.add_all([enrollment, forum])
        await db.commit()
        print("Created enrollment:", enrollment.id)
        print("Created forum:", forum.id)

    for role, person in (
        (AuthorRole.admin, admin),
        (AuthorRole.teacher, teacher),
        (AuthorRole.parent, parent),
        (AuthorRole.student, student),
    ):
        token = create_access_token(subject={"sub": str(person.id), "role": role.value})
        print(f"{role.value} {person.id}: {token}")


async def main() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as db:
        try:
            await seed_dev_data(db)
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise


if __name__ == "__main__":
    asyncio.run(main())
