"""
Unit tests for LeaderboardRepository
"""

import pytest

from app.core.exceptions import PersistenceError
from app.models.leaderboard import LeaderboardEntry
from app.repositories.leaderboard import LeaderboardRepository


def make_entry(device_id: str, score: int, updated_at: int, nickname: str = "Player") -> LeaderboardEntry:
    return LeaderboardEntry(
        device_id=device_id, nickname=nickname, score=score, updated_at=updated_at
    )


async def get_row(repo: LeaderboardRepository, device_id: str) -> LeaderboardEntry:
    rows = await repo.fetch_top(1000)
    return next(row for row in rows if row.device_id == device_id)


class TestLeaderboardRepository:
    """Test suite for leaderboard storage operations."""

    @pytest.mark.asyncio
    async def test_upsert_inserts_new_device(self, test_db, sample_entry):
        repo = LeaderboardRepository(test_db)

        # Act
        written = await repo.upsert(sample_entry)

        # Assert
        assert written is True
        existing = await repo.get_by_device(sample_entry.device_id)
        assert existing is not None
        assert existing.device_id == sample_entry.device_id
        assert existing.score == sample_entry.score

    @pytest.mark.asyncio
    async def test_upsert_uses_session_exec(self, test_db, sample_entry, recwarn):
        repo = LeaderboardRepository(test_db)

        # Act
        await repo.upsert(sample_entry)

        # Assert
        assert not [w for w in recwarn if "session.exec" in str(w.message)]

    @pytest.mark.asyncio
    async def test_get_by_device_not_found(self, test_db):
        repo = LeaderboardRepository(test_db)

        assert await repo.get_by_device("unknown-device") is None

    @pytest.mark.asyncio
    async def test_upsert_higher_score_replaces_row(self, test_db):
        repo = LeaderboardRepository(test_db)
        await repo.upsert(make_entry("device-1", 100, 1_000, nickname="Old"))

        # Act
        written = await repo.upsert(make_entry("device-1", 150, 2_000, nickname="New"))

        # Assert
        assert written is True
        row = await get_row(repo, "device-1")
        assert (row.nickname, row.score, row.updated_at) == ("New", 150, 2_000)
        assert await repo.fetch_total_count() == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [100, 50])
    async def test_upsert_equal_or_lower_score_is_ignored(self, test_db, score):
        """The storage-level guard keeps the best score even without a prior read"""
        repo = LeaderboardRepository(test_db)
        await repo.upsert(make_entry("device-1", 100, 1_000, nickname="Old"))

        # Act
        written = await repo.upsert(make_entry("device-1", score, 2_000, nickname="New"))

        # Assert
        assert written is False
        row = await get_row(repo, "device-1")
        assert (row.nickname, row.score, row.updated_at) == ("Old", 100, 1_000)

    @pytest.mark.asyncio
    async def test_fetch_top_orders_by_score_then_earliest_update(self, test_db):
        repo = LeaderboardRepository(test_db)
        await repo.upsert(make_entry("device-late", 500, 3_000))
        await repo.upsert(make_entry("device-low", 100, 1_000))
        await repo.upsert(make_entry("device-early", 500, 2_000))
        await repo.upsert(make_entry("device-top", 900, 4_000))

        # Act
        rows = await repo.fetch_top(10)

        # Assert
        assert [row.device_id for row in rows] == [
            "device-top",
            "device-early",
            "device-late",
            "device-low",
        ]

    @pytest.mark.asyncio
    async def test_fetch_top_limits_results(self, test_db):
        repo = LeaderboardRepository(test_db)
        for i in range(12):
            await repo.upsert(make_entry(f"device-{i:02d}", i + 1, 1_000 + i))

        # Act
        rows = await repo.fetch_top(10)

        # Assert
        assert len(rows) == 10
        assert rows[0].score == 12
        assert rows[-1].score == 3
        assert await repo.fetch_total_count() == 12

    @pytest.mark.asyncio
    async def test_fetch_top_reflects_updates_in_same_session(self, test_db):
        repo = LeaderboardRepository(test_db)
        await repo.upsert(make_entry("device-1", 100, 1_000, nickname="Before"))
        await repo.fetch_top(10)

        # Act
        await repo.upsert(make_entry("device-1", 200, 2_000, nickname="After"))
        rows = await repo.fetch_top(10)

        # Assert
        assert rows[0].nickname == "After"
        assert rows[0].score == 200

    @pytest.mark.asyncio
    async def test_fetch_total_count_empty(self, test_db):
        repo = LeaderboardRepository(test_db)

        assert await repo.fetch_total_count() == 0

    @pytest.mark.asyncio
    async def test_storage_failures_raise_persistence_error(self, broken_db, sample_entry):
        repo = LeaderboardRepository(broken_db)

        with pytest.raises(PersistenceError):
            await repo.get_by_device(sample_entry.device_id)
        with pytest.raises(PersistenceError):
            await repo.upsert(sample_entry)
        with pytest.raises(PersistenceError):
            await repo.fetch_top(10)
        with pytest.raises(PersistenceError):
            await repo.fetch_total_count()
