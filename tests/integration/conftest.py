"""
Fixtures for integration tests
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.db import get_db
from app.core.rate_limit import SlidingWindowRateLimiter, get_submit_limiter
from app.main import app


@pytest.fixture
def submit_limiter() -> SlidingWindowRateLimiter:
    """Fresh limiter per test, with the production limits"""
    return SlidingWindowRateLimiter(limit=5, window_seconds=60)


@pytest.fixture
async def client(test_engine, submit_limiter) -> AsyncGenerator[AsyncClient]:
    """
    HTTP client for testing API endpoints.

    Overrides the database session and rate limiter dependencies.
    """
    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with AsyncSession(test_engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_submit_limiter] = lambda: submit_limiter

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
