import sqlmodel
from sqlalchemy import Index

from ._base import BaseModel


class LeaderboardEntry(BaseModel, table=True):
    __tablename__: str = "leaderboard"

    device_id: str = sqlmodel.Field(primary_key=True)
    """Opaque client-generated identifier, one row per device"""
    nickname: str
    """Sanitized display name from the last accepted submission"""
    score: int
    """Best score ever submitted for the device"""
    updated_at: int = sqlmodel.Field(sa_type=sqlmodel.BigInteger)
    """Epoch milliseconds of the last accepted submission, used as tie-break"""


Index(
    "idx_leaderboard_score_updated",
    sqlmodel.col(LeaderboardEntry.score).desc(),
    sqlmodel.col(LeaderboardEntry.updated_at).asc(),
)
