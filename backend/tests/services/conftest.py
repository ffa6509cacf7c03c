"""Service test fixtures — async DB, seeded teams, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency; PRAGMA foreign_keys=ON keeps cascade
      and reference checks equivalent to PostgreSQL
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from teampool.db.base import Base
from teampool.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
import teampool.infrastructure.database as db_module
import teampool.models  # noqa: F401
from teampool.main import app
from teampool.services.membership import MembershipManager
from teampool.services.team_registry import TeamRegistry

from tests.services.ledger_fixtures import OWNER, OWNER_ID, FakeClock, profile_for


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def team_id(test_db):
    """A team owned by OWNER_ID with only the owner as member."""
    return await TeamRegistry(test_db).create_team("Trip Fund", OWNER_ID, OWNER)


@pytest.fixture
async def team_with_members(test_db, team_id, clock):
    """Team plus members u1, u2, u3 joined via one invitation."""
    manager = MembershipManager(test_db, clock=clock)
    invitation = await manager.generate_invite_link(team_id, OWNER_ID)
    for user_id in ("u1", "u2", "u3"):
        await manager.join_team_with_invite(
            invitation["token"], user_id, profile_for(user_id),
        )
    return team_id


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
