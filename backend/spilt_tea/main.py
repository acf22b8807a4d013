"""Spilt Tea Backend -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from spilt_tea.api.v1.router import api_v1_router
from spilt_tea.config import settings
from spilt_tea.core.exceptions import SpiltTeaException, UnauthorizedError
from spilt_tea.db.session import engine
from spilt_tea.models import Base
from spilt_tea.schemas.common import ErrorDetail, ErrorResponse
from spilt_tea.services.cache_service import get_cache_service

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    # Startup
    logger.info("Starting Spilt Tea API server...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified/created")

    # Redis is optional at startup: trending is served uncached without it,
    # phone verification fails until it comes back
    cache = get_cache_service()
    if await cache.health_check():
        logger.info("Redis cache connected successfully")
    else:
        logger.warning("Redis cache connection failed (will operate without caching)")

    yield

    # Shutdown
    logger.info("Shutting down Spilt Tea API server...")
    await cache.close()
    await engine.dispose()


app = FastAPI(
    title="Spilt Tea API",
    description="Community dating-safety board: posts, persons, votes and vetting",
    version="0.1.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SpiltTeaException)
async def spilt_tea_exception_handler(request: Request, exc: SpiltTeaException):
    """Render domain errors as ErrorResponse with the exception's status code."""
    body = ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message))
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


# Register API v1 router
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Spilt Tea API",
        "version": "0.1.0",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/api/v1/health",
    }
