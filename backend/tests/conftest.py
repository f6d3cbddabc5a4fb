"""
Pytest fixtures for test database, clients, and authentication.

Every test gets a fresh in-memory SQLite database (aiosqlite) seeded with the
standard hospitals. Redis is disabled so the cache falls through to the
database.
"""

import asyncio
import os
from typing import AsyncGenerator, Callable, Iterable, List

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["REDIS_ENABLED"] = "false"
os.environ["COMPLEMENT_PROVIDER"] = "local"
os.environ["ENVIRONMENT"] = "test"

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from admissions.main import app
from admissions.db.base import Base
from admissions.db.session import get_db
from admissions.core.security import create_access_token
from admissions.models import HospitalRecord
from admissions.repositories import DatabaseHospitalRepository, DatabasePatientRepository

SEED_HOSPITALS = ["Atascadero", "Coalinga", "Metropolitan", "Napa", "Patton"]


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables in a private in-memory database and yield a session."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def add_hospitals(db_session: AsyncSession) -> Callable:
    """Factory fixture: insert hospitals by name."""

    async def _add(names: Iterable[str]) -> List[HospitalRecord]:
        records = [HospitalRecord(name=name) for name in names]
        db_session.add_all(records)
        await db_session.commit()
        return records

    return _add


@pytest_asyncio.fixture
async def hospitals(add_hospitals) -> List[HospitalRecord]:
    """The five hospitals the migration seeds."""
    return await add_hospitals(SEED_HOSPITALS)


@pytest_asyncio.fixture
async def patient_repo(db_session: AsyncSession) -> DatabasePatientRepository:
    return DatabasePatientRepository(db_session)


@pytest_asyncio.fixture
async def hospital_repo(db_session: AsyncSession) -> DatabaseHospitalRepository:
    return DatabaseHospitalRepository(db_session)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, hospitals) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    # A lock created on another test's event loop cannot be awaited on this one
    app.state.admission_lock = asyncio.Lock()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_token() -> str:
    """Generate a JWT token for a test clerk."""
    return create_access_token(data={"sub": "clerk@example.com"})


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}
