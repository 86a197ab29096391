from collections.abc import AsyncGenerator

from loguru import logger
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.models.leaderboard import LeaderboardEntry

engine = create_async_engine(settings.database_url)


async def get_db() -> AsyncGenerator[AsyncSession]:
    async with AsyncSession(
        engine, autocommit=False, autoflush=False, expire_on_commit=False
    ) as session:
        yield session


async def init_db() -> None:
    """Create the leaderboard table and its ranking index if they don't exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all, tables=[LeaderboardEntry.__table__])
    logger.info(f"Database schema ready at {engine.url.render_as_string(hide_password=True)}")
