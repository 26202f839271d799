"""
Pytest Configuration and Fixtures

Shared test fixtures for unit, integration and API tests. Tests run against an
in-memory SQLite database; the store's upsert picks the SQLite dialect there.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import configure_mappers
from sqlalchemy.pool import StaticPool

from goalsportal.core.models import Admin, Base, RosterPair

# Ensure all mappers are configured
configure_mappers()

EDUCATOR = "a@x.org"
EVALUATOR = "b@x.org"
RESOLUTION = "r@x.org"
ADMIN = "admin@x.org"
OUTSIDER = "z@x.org"


@pytest.fixture
async def async_engine():
    """Create async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncSession:
    """Create database session for testing."""
    session_factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session


@pytest.fixture
async def roster(db_session: AsyncSession) -> list[RosterPair]:
    """Seed three pairs and one admin.

    P1: a (educator), b (evaluator), r (resolution)
    P2: c (educator), b (evaluator), r (resolution)
    P3: d, e, f (nobody from P1)
    """
    pairs = [
        RosterPair(
            pair_id="P1",
            school_name="Lincoln Elementary",
            educator_email="A@X.org",
            educator_name="Ana Educator",
            evaluator_email=EVALUATOR,
            evaluator_name="Ben Evaluator",
            resolution_email=RESOLUTION,
            resolution_name="Rae Resolution",
        ),
        RosterPair(
            pair_id="P2",
            school_name="Lincoln Elementary",
            educator_email="c@x.org",
            educator_name="Cal Educator",
            evaluator_email=EVALUATOR,
            evaluator_name="Ben Evaluator",
            resolution_email=RESOLUTION,
            resolution_name="Rae Resolution",
        ),
        RosterPair(
            pair_id="P3",
            school_name="Roosevelt Middle",
            educator_email="d@x.org",
            evaluator_email="e@x.org",
            resolution_email="f@x.org",
        ),
    ]
    db_session.add_all(pairs)
    db_session.add(Admin(email=ADMIN))
    await db_session.commit()
    return pairs
