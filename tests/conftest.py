"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.db import get_db, init_db
from app.core.security import create_access_token
from app.db.models import Document as DocumentModel, User as UserModel
from app.domains.access.roles import RequesterContext, RoleLevel


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite shared by every session of a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the app with the test database."""
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class Factory:
    """Inserts users and documents straight into the store."""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._clock = datetime(2024, 1, 1)
        self._counter = 0

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    async def user(self, name="Jane Doe", role_level=RoleLevel.REGULAR, deleted=False) -> UserModel:
        self._counter += 1
        async with self.session_factory() as session:
            user = UserModel(
                name=name,
                email=f"user{self._counter}@example.com",
                password_hash="not-a-real-hash",
                role_level=role_level,
                deleted_at=datetime(2024, 6, 1) if deleted else None,
            )
            session.add(user)
            await session.commit()
            return user

    async def document(self, owner, title="Notes", visibility="private", threshold=RoleLevel.REGULAR,
                       content="hello", type="plain") -> DocumentModel:
        stamp = self._tick()
        async with self.session_factory() as session:
            document = DocumentModel(
                title=title,
                content=content,
                type=type,
                visibility=visibility,
                threshold=threshold,
                owner_id=owner.id,
                created_at=stamp,
                updated_at=stamp,
            )
            session.add(document)
            await session.commit()
            return document


@pytest.fixture
def factory(session_factory):
    return Factory(session_factory)


def requester_for(user) -> RequesterContext:
    return RequesterContext(id=user.id, role_level=user.role_level)


def auth_headers(user) -> dict:
    token = create_access_token({"sub": str(user.id), "role": int(user.role_level)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def as_requester():
    return requester_for


@pytest.fixture
def headers_for():
    return auth_headers
