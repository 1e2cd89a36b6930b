"""
VidHub — Main FastAPI Application

Engagement layer for the video platform: comments, likes, subscriptions
and playlists over the shared user/video catalog.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sqlalchemy.exc import SQLAlchemyError

from vidhub.core.config import get_settings
from vidhub.core.database import init_db
from vidhub.core.errors import InternalError, ValidationError, VidHubError

settings = get_settings()

# ── Logging ──────────────────────────────────────────────────────────────

logging.basicConfig(format="%(message)s", level=logging.getLevelName(settings.log_level))

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.log_level)
    ),
)

logger = structlog.get_logger()


# ── Lifespan ─────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks."""
    logger.info("Starting VidHub", version=settings.app_version)
    await init_db()
    logger.info("VidHub ready", api_prefix=settings.api_prefix)

    yield

    from vidhub.core.database import engine
    await engine.dispose()
    logger.info("Shutting down VidHub")


# ── App ──────────────────────────────────────────────────────────────────

app = FastAPI(
    title="VidHub",
    description="Comments, likes, subscriptions and playlists for the video catalog",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Prometheus metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


# ── Errors ───────────────────────────────────────────────────────────────

@app.exception_handler(VidHubError)
async def vidhub_error_handler(request: Request, exc: VidHubError):
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.kind, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Same {"detail", "error"} shape as service-level validation failures
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("query", "path", "body"))
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    error = ValidationError("; ".join(problems) or "Invalid request")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Fact store error", path=request.url.path)
    error = InternalError("Internal store error")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ── Routes ───────────────────────────────────────────────────────────────

from vidhub.api.routes import comments, likes, playlists, subscriptions

app.include_router(comments.router, prefix=settings.api_prefix)
app.include_router(likes.router, prefix=settings.api_prefix)
app.include_router(subscriptions.router, prefix=settings.api_prefix)
app.include_router(playlists.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "description": "Engagement layer: comments, likes, subscriptions, playlists",
        "version": settings.app_version,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}
