from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.rate_limit import limit_submissions
from app.schemas.common import ErrorResponse
from app.schemas.leaderboard import LeaderboardResponse, ScoreSubmissionBody, SubmitScoreResponse
from app.services.score import ScoreService

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
async def get_leaderboard(service: Annotated[ScoreService, Depends()]) -> LeaderboardResponse:
    top, total_players = await service.get_leaderboard()
    return LeaderboardResponse(top=top, total_players=total_players)


@router.post(
    "/score",
    dependencies=[Depends(limit_submissions)],
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
async def submit_score(
    payload: ScoreSubmissionBody, service: Annotated[ScoreService, Depends()]
) -> SubmitScoreResponse:
    top = await service.submit_score(payload.device_id, payload.nickname, payload.score)
    return SubmitScoreResponse(top=top)
