import asyncio
import os

# Keep the application's own engine away from any real database file.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.database import Base, build_engine, get_db
from app.main import app as dashboard_app
from app.models import User


def _database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'dashboard_test.db'}"


async def _create_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest_asyncio.fixture
async def db(tmp_path):
    """A session bound to a fresh SQLite database."""
    engine = build_engine(_database_url(tmp_path), poolclass=NullPool)
    await _create_schema(engine)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def user(db) -> User:
    user = User(name="Test User", email="test@example.com", location="Test City")
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest.fixture
def client(tmp_path):
    """TestClient whose requests run against a fresh SQLite database."""
    engine = build_engine(_database_url(tmp_path), poolclass=NullPool)
    asyncio.run(_create_schema(engine))
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    dashboard_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(dashboard_app)
    dashboard_app.dependency_overrides.clear()
    asyncio.run(engine.dispose())
