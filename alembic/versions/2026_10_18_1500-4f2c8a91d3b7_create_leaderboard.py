# pyright: reportAttributeAccessIssue=false, reportUndefinedVariable=false
"""create_leaderboard

Revision ID: 4f2c8a91d3b7
Revises:
Create Date: 2026-10-18 15:00:12.481533

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel.sql.sqltypes

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2c8a91d3b7"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "leaderboard",
        sa.Column("device_id", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("nickname", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("device_id"),
    )
    # Serves the ranking query: ORDER BY score DESC, updated_at ASC
    op.create_index(
        "idx_leaderboard_score_updated",
        "leaderboard",
        [sa.text("score DESC"), sa.text("updated_at ASC")],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_leaderboard_score_updated", table_name="leaderboard")
    op.drop_table("leaderboard")
