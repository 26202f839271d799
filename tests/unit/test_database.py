"""
Tests for database session management and utilities.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from goalsportal.core.database import AsyncSessionLocal, close_db, get_db, init_db


def fake_session_factory() -> tuple[MagicMock, AsyncMock]:
    session = AsyncMock()
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory, session


class TestDatabaseSessionManagement:
    """Test database session lifecycle."""

    async def test_get_db_commits_on_success(self) -> None:
        factory, session = fake_session_factory()

        with patch("goalsportal.core.database.AsyncSessionLocal", factory):
            async for yielded in get_db():
                assert yielded is session

        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()
        session.close.assert_awaited_once()

    async def test_get_db_rollback_on_exception(self) -> None:
        factory, session = fake_session_factory()

        with patch("goalsportal.core.database.AsyncSessionLocal", factory):
            gen = get_db()
            await gen.__anext__()
            with pytest.raises(RuntimeError):
                await gen.athrow(RuntimeError("Simulated error"))

        session.commit.assert_not_awaited()
        session.rollback.assert_awaited_once()
        session.close.assert_awaited_once()


class TestDatabaseInitialization:
    """Test database initialization and teardown helpers."""

    def test_helpers_are_callable(self) -> None:
        assert callable(init_db)
        assert callable(close_db)


class TestSessionMakerConfiguration:
    """Test AsyncSessionLocal configuration."""

    def test_session_maker_configuration(self) -> None:
        assert AsyncSessionLocal.kw.get("expire_on_commit") is False

    def test_engine_configuration(self) -> None:
        from goalsportal.core.database import engine

        assert engine.pool._pre_ping is True
