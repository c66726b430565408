"""Pytest configuration and shared fixtures.

API tests run the application against an in-memory SQLite database (aiosqlite) that
replaces the ``get_db`` dependency, and a local storage backend rooted in a temporary
directory.
"""
import os
from datetime import time
from itertools import count
from typing import Any, Dict

# Settings are read on import, so the environment must be prepared first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["COOKIE_SECURE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("LOG_DIR", None)
os.environ.pop("SUPER_ADMIN_EMAIL", None)

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from schoolhub import create_app
from schoolhub.core.database import get_db
from schoolhub.core.security import create_access_token, get_password_hash
from schoolhub.models import (
    Administration, Base, Class, Grade, Lesson, Parent, School, Student, Subject, Teacher,
)
from schoolhub.schemas.enums import AdminRole, Role, Term, Weekday
from schoolhub.services.storage_service import LocalStorage, get_storage

PASSWORD = "password123"


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: pure unit tests without a database")
    config.addinivalue_line("markers", "integration: API tests against an in-memory database")


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


class Seeder:
    """Creates committed rows directly in the test database."""

    _hash = None

    def __init__(self, factory):
        self.factory = factory
        self.sequence = count(1)
        if Seeder._hash is None:
            Seeder._hash = get_password_hash(PASSWORD)

    async def add(self, record: Any) -> Any:
        async with self.factory() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
        return record

    async def count(self, model, *where) -> int:
        async with self.factory() as session:
            return await session.scalar(select(func.count(model.id)).where(*where))

    async def fetch(self, model, record_id: int):
        async with self.factory() as session:
            return await session.get(model, record_id)

    async def school(self, **values) -> School:
        n = next(self.sequence)
        values.setdefault("name", f"School {n}")
        values.setdefault("email", f"school{n}@example.com")
        return await self.add(School(**values))

    async def admin(self, school=None, role: AdminRole = AdminRole.ADMIN, **values) -> Administration:
        n = next(self.sequence)
        values.setdefault("username", f"admin{n}")
        values.setdefault("email", f"admin{n}@example.com")
        return await self.add(Administration(
            role=role,
            school_id=school.id if school else None,
            password_hash=self._hash,
            active=values.pop("active", True),
            **values
        ))

    async def teacher(self, school, **values) -> Teacher:
        n = next(self.sequence)
        values.setdefault("firstname", f"Teacher{n}")
        values.setdefault("surname", "Okafor")
        values.setdefault("email", f"teacher{n}@example.com")
        return await self.add(Teacher(
            school_id=school.id,
            password_hash=self._hash,
            active=values.pop("active", True),
            **values
        ))

    async def parent(self, school, **values) -> Parent:
        n = next(self.sequence)
        values.setdefault("firstname", f"Parent{n}")
        values.setdefault("surname", "Adeyemi")
        values.setdefault("email", f"parent{n}@example.com")
        return await self.add(Parent(
            school_id=school.id,
            password_hash=self._hash,
            active=values.pop("active", True),
            **values
        ))

    async def klass(self, school, form_master=None, **values) -> Class:
        n = next(self.sequence)
        values.setdefault("name", f"JSS {n}")
        values.setdefault("category", "A")
        return await self.add(Class(
            school_id=school.id,
            form_master_id=form_master.id if form_master else None,
            **values
        ))

    async def student(self, school, klass, parent, **values) -> Student:
        n = next(self.sequence)
        values.setdefault("firstname", f"Student{n}")
        values.setdefault("surname", "Bello")
        values.setdefault("admission_number", f"SEED/2020/{n:05d}")
        return await self.add(Student(
            school_id=school.id,
            class_id=klass.id,
            parent_id=parent.id,
            password_hash=self._hash,
            active=values.pop("active", True),
            **values
        ))

    async def subject(self, school, teacher=None, **values) -> Subject:
        n = next(self.sequence)
        values.setdefault("name", f"Subject {n}")
        return await self.add(Subject(school_id=school.id, teacher_id=teacher.id if teacher else None, **values))

    async def lesson(self, school, klass, subject, teacher, **values) -> Lesson:
        values.setdefault("name", subject.name)
        values.setdefault("day", Weekday.MONDAY)
        values.setdefault("start_time", time(8, 0))
        values.setdefault("end_time", time(8, 40))
        return await self.add(Lesson(
            school_id=school.id,
            class_id=klass.id,
            subject_id=subject.id,
            teacher_id=teacher.id,
            **values
        ))

    async def grade(self, school, **values) -> Grade:
        values.setdefault("title", "First term results")
        values.setdefault("session", "2024/2025")
        values.setdefault("term", Term.FIRST)
        return await self.add(Grade(school_id=school.id, **values))


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)


# =============================================================================
# Application
# =============================================================================


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture
def app(session_factory, storage):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def bearer(user: Any, role: Role = None) -> Dict[str, str]:
    """Authorization header for a seeded account."""
    if role is None:
        if isinstance(user, Administration):
            role = user.role.to_role()
        elif isinstance(user, Teacher):
            role = Role.TEACHER
        elif isinstance(user, Student):
            role = Role.STUDENT
        else:
            role = Role.PARENT
    return {"Authorization": f"Bearer {create_access_token(user.id, role)}"}


@pytest.fixture
def auth():
    return bearer
