"""
Storage for the leaderboard table.

One row per device. Writes go through a single conditional upsert so concurrent
submissions for the same device can never replace a higher stored score.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, desc, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db import get_db
from app.core.exceptions import PersistenceError
from app.models.leaderboard import LeaderboardEntry
from app.schemas.leaderboard import DeviceScore


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise PersistenceError(operation) from e


class LeaderboardRepository:
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db)]) -> None:
        self.db = db

    def _insert(self):  # noqa: ANN202
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(LeaderboardEntry)
        if dialect == "sqlite":
            return sqlite.insert(LeaderboardEntry)
        msg = f"Conditional upsert is not supported on {dialect}"
        raise NotImplementedError(msg)

    async def get_by_device(self, device_id: str) -> DeviceScore | None:
        with storage_errors("get_by_device"):
            result = await self.db.exec(
                select(LeaderboardEntry.device_id, LeaderboardEntry.score).where(
                    col(LeaderboardEntry.device_id) == device_id
                )
            )
            row = result.first()

        if row is None:
            return None
        found_device_id, score = row
        return DeviceScore(device_id=found_device_id, score=score)

    async def upsert(self, entry: LeaderboardEntry) -> bool:
        """Insert the entry, or overwrite the stored row only if entry.score is higher.

        The comparison runs inside the INSERT ... ON CONFLICT statement, so the
        database serializes competing writes for the same device.

        Returns:
            True if a row was inserted or updated, False if the stored score was
            already greater than or equal to entry.score.
        """
        stmt = self._insert().values(
            device_id=entry.device_id,
            nickname=entry.nickname,
            score=entry.score,
            updated_at=entry.updated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[col(LeaderboardEntry.device_id)],
            set_={
                "nickname": stmt.excluded.nickname,
                "score": stmt.excluded.score,
                "updated_at": stmt.excluded.updated_at,
            },
            where=col(LeaderboardEntry.score) < stmt.excluded.score,
        )

        with storage_errors("upsert"):
            try:
                result = await self.db.exec(stmt)
                await self.db.commit()
            except SQLAlchemyError:
                await self.db.rollback()
                raise

        return result.rowcount > 0

    async def fetch_top(self, n: int) -> Sequence[LeaderboardEntry]:
        """Get the n best rows, score descending then earliest update first."""
        with storage_errors("fetch_top"):
            result = await self.db.exec(
                select(LeaderboardEntry)
                .order_by(desc(col(LeaderboardEntry.score)), col(LeaderboardEntry.updated_at))
                .limit(n)
                .execution_options(populate_existing=True)
            )
            return result.all()

    async def fetch_total_count(self) -> int:
        with storage_errors("fetch_total_count"):
            result = await self.db.exec(select(func.count()).select_from(LeaderboardEntry))
            return result.one()
