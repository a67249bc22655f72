"""
FastAPI application.

Provides REST API endpoints for the learning frontend: profile, lessons,
lesson completion and leaderboards.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aura.config import config
from aura.core.exceptions import (
    AuraError,
    ConcurrentUpdateError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from aura.database.config import close_db, init_db
from aura.interfaces.api.routers import leaderboard, lesson, user

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Aura Rank API",
    description="Gamification and ranking API for the learning app",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS: frontend + development
allowed_origins = [
    "http://localhost:3000",  # Local development
    "http://localhost:5173",
]

if config.FRONTEND_URL:
    frontend_url = config.FRONTEND_URL.rstrip("/")
    allowed_origins.append(frontend_url)
    logger.info(f"Added frontend URL to CORS origins: {frontend_url}")

# Development: allow all origins if FRONTEND_URL not set
allow_credentials = True
if not config.FRONTEND_URL and config.ENVIRONMENT != "production":
    allowed_origins = ["*"]
    allow_credentials = False  # Cannot use credentials with wildcard

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user.router)
app.include_router(lesson.router)
app.include_router(leaderboard.router)


# Domain error -> HTTP status
ERROR_STATUS: list[tuple[type[AuraError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ConcurrentUpdateError, status.HTTP_409_CONFLICT),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
]


def status_for(error: AuraError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(AuraError)
async def aura_error_handler(request: Request, exc: AuraError) -> JSONResponse:
    """Translate domain errors into JSON responses."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.exception(f"Error handling {request.method} {request.url.path}: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.error_code},
    )


@app.on_event("startup")
async def startup():
    """Initialize database connection on startup."""
    await init_db()


@app.on_event("shutdown")
async def shutdown():
    """Close database connection on shutdown."""
    await close_db()


@app.get("/health")
async def health():
    """Health check for monitoring."""
    return {"status": "healthy", "service": "aura-rank"}
