"""
Pytest fixtures and configuration for all tests.
"""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.models.leaderboard import LeaderboardEntry


@pytest.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """
    Provide an engine on a fresh SQLite file with the leaderboard schema.

    Each test gets its own file, so nothing leaks between tests.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'leaderboard_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession]:
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def broken_db(tmp_path) -> AsyncGenerator[AsyncSession]:
    """Session on a database without the leaderboard table, so every query fails."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
    await engine.dispose()


@pytest.fixture
def fake_clock(monkeypatch) -> list[int]:
    """
    Replace the service clock with a controllable one.

    Every call returns the current value and then advances it by one second, so
    consecutive writes get distinct, increasing timestamps. Tests can also set
    clock[0] directly.
    """
    clock = [1_700_000_000_000]

    def now() -> int:
        value = clock[0]
        clock[0] += 1000
        return value

    monkeypatch.setattr("app.services.score.get_epoch_ms", now)
    return clock


@pytest.fixture
def sample_entry() -> LeaderboardEntry:
    return LeaderboardEntry(
        device_id="device-abc-123",
        nickname="Alice",
        score=100,
        updated_at=1_700_000_000_000,
    )


@pytest.fixture
def sample_submission() -> dict:
    """Sample POST /api/score body."""
    return {"deviceId": "device-abc-123", "nickname": "Alice", "score": 100}
