from typing import Annotated, Any

from fastapi import Depends
from loguru import logger

from app.core.config import settings
from app.models.leaderboard import LeaderboardEntry
from app.repositories.leaderboard import LeaderboardRepository
from app.schemas.leaderboard import LeaderboardEntryRead
from app.utils.misc import get_epoch_ms
from app.utils.validation import validate_submission


class ScoreService:
    def __init__(self, repo: Annotated[LeaderboardRepository, Depends()]) -> None:
        self.repo = repo

    async def get_top(self) -> list[LeaderboardEntryRead]:
        entries = await self.repo.fetch_top(settings.leaderboard_size)
        return [LeaderboardEntryRead.model_validate(entry) for entry in entries]

    async def get_leaderboard(self) -> tuple[list[LeaderboardEntryRead], int]:
        """Get the public ranking and the number of players who ever submitted."""
        top = await self.get_top()
        total_players = await self.repo.fetch_total_count()
        return top, total_players

    async def submit_score(
        self, device_id: Any, nickname: Any, score: Any
    ) -> list[LeaderboardEntryRead]:
        """Record a score for a device and return the resulting ranking.

        Only a strictly higher score is written; the nickname is refreshed along with it.
        Equal or lower scores are accepted and ignored, keeping the original timestamp
        and therefore the tie-break position.

        Raises:
            ValidationError: if any field is invalid. Storage is not touched.
            PersistenceError: if the database fails.
        """
        submission = validate_submission(device_id, nickname, score)

        existing = await self.repo.get_by_device(submission.device_id)
        if existing is not None and submission.score <= existing.score:
            logger.debug(
                f"Ignoring score {submission.score} for {submission.device_id}, "
                f"best is {existing.score}"
            )
            return await self.get_top()

        written = await self.repo.upsert(
            LeaderboardEntry(
                device_id=submission.device_id,
                nickname=submission.nickname,
                score=submission.score,
                updated_at=get_epoch_ms(),
            )
        )
        if written:
            logger.info(
                f"New best score {submission.score} for {submission.device_id} "
                f"({submission.nickname})"
            )
        else:
            # Lost a race against a concurrent higher submission.
            logger.debug(f"Upsert for {submission.device_id} superseded by a higher stored score")

        return await self.get_top()
