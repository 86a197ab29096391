from typing import Any

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

camel_config = ConfigDict(
    alias_generator=AliasGenerator(alias=to_camel), populate_by_name=True, from_attributes=True
)


class LeaderboardEntryRead(BaseModel):
    """Public view of a leaderboard row."""

    model_config = camel_config

    device_id: str
    nickname: str
    score: int
    updated_at: int


class DeviceScore(BaseModel):
    """Just enough of a row to decide whether a submission improves on it."""

    model_config = camel_config

    device_id: str
    score: int


class ScoreSubmissionBody(BaseModel):
    """Raw POST /api/score body.

    Fields are left untyped so that bad values reach our own validators and come back
    as a 400 naming the field, instead of a generic schema error.
    """

    model_config = camel_config

    device_id: Any = None
    nickname: Any = None
    score: Any = None


class ScoreSubmission(BaseModel):
    """A submission that passed validation, with the nickname already sanitized."""

    device_id: str
    nickname: str
    score: int


class LeaderboardResponse(BaseModel):
    model_config = camel_config

    top: list[LeaderboardEntryRead]
    total_players: int


class SubmitScoreResponse(BaseModel):
    top: list[LeaderboardEntryRead]
