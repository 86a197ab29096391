from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from app.core.config import settings
from app.core.db import engine, init_db
from app.core.exceptions import PersistenceError, RateLimitError, ValidationError
from app.schemas.common import HealthResponse
from app.utils.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    persistence_exception_handler,
    rate_limit_exception_handler,
    request_validation_exception_handler,
    validation_exception_handler,
)
from app.utils.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from app.utils.router_discovery import register_routers


@asynccontextmanager
async def app_lifespan(_: FastAPI) -> AsyncGenerator[None, FastAPI]:
    if settings.auto_create_tables:
        await init_db()

    yield

    await engine.dispose()


app = FastAPI(
    title="Leaderboard API",
    lifespan=app_lifespan,
    servers=[{"url": f"http://localhost:{settings.port}", "description": "Local server"}],
)


app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


register_routers(app)

app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitError, rate_limit_exception_handler)
app.add_exception_handler(PersistenceError, persistence_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.get("/health")
async def health() -> HealthResponse:
    return HealthResponse()


# Mounted last so the API routes above take precedence
if settings.static_dir:
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
