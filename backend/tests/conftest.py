"""
Pytest configuration for Taskboard backend tests.

Provides:
- A fresh in-memory SQLite database (aiosqlite) per test
- An httpx AsyncClient bound to the app with get_db overridden
- Factories for users, projects, tasks and comments
- Bearer token headers for any user
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-taskboard-tests-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")

import logging
import uuid
from collections.abc import AsyncGenerator

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.authz.identity import Role
from app.core.database import get_db
from app.core.security import create_access_token
from app.main import app
from app.models import Base, Comment, Project, Task, User

logging.basicConfig(level=logging.WARNING)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def pytest_configure(config):
    """Configure pytest-asyncio mode."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    """App client; every request gets its own committed-or-rolled-back session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db_session):
    async def _make_user(role: Role = Role.member, first_name: str = "Test") -> User:
        user = User(
            email=f"user_{uuid.uuid4().hex[:8]}@example.com",
            first_name=first_name,
            last_name="User",
            role=role,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_project(db_session):
    async def _make_project(creator: User, members: list[User] | None = None, name: str = "Project") -> Project:
        project = Project(name=name, created_by=creator.id)
        project.members = list(members or [])
        db_session.add(project)
        await db_session.commit()
        return project

    return _make_project


@pytest.fixture
def make_task(db_session):
    async def _make_task(project: Project, assignee: User | None = None, title: str = "Task") -> Task:
        task = Task(
            project_id=project.id,
            title=title,
            assignee_id=assignee.id if assignee is not None else None,
        )
        db_session.add(task)
        await db_session.commit()
        return task

    return _make_task


@pytest.fixture
def make_comment(db_session):
    async def _make_comment(task: Task, author: User, content: str = "A comment") -> Comment:
        comment = Comment(task_id=task.id, author_id=author.id, content=content)
        db_session.add(comment)
        await db_session.commit()
        return comment

    return _make_comment


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user(role=Role.admin, first_name="Admin")


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}

    return _auth_headers
