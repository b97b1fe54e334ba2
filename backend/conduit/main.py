"""Conduit API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ConduitError -> RealWorld {"errors": ...} responses
    - CORS configured from settings (not hardcoded)
    - Every response carries X-Request-ID; the id is visible to logs via a ContextVar
    - Database initialized on startup via lifespan context manager
    - /api/dev routes exist only when enable_dev_endpoints is set

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Request id middleware as a plain function middleware: no extra dependency
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from conduit.api.error_handlers import register_error_handlers
from conduit.api.routes import (
    health, users, profiles, articles, comments, tags, maintenance,
)
from conduit.config import get_settings
from conduit.infrastructure.database import init_db
from conduit.infrastructure.observability import setup_logging, request_id_var

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Conduit API started")
    yield
    logger.info("Conduit API shutting down")
    await manager.dispose()


app = FastAPI(title="Conduit API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Attach a request id to the log context and the response."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    token = request_id_var.set(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return response


# Routes - explicit registration
app.include_router(health.router)
app.include_router(users.router)
app.include_router(profiles.router)
app.include_router(articles.router)
app.include_router(comments.router)
app.include_router(tags.router)
if settings.enable_dev_endpoints:
    app.include_router(maintenance.router)

register_error_handlers(app)
