"""
Cenly API application.

Run with `cenly-api` or `uvicorn api.main:app`.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import setup_exception_handlers
from api.routers import (
    generate_router,
    health_router,
    profile_router,
    projects_router,
)
from core.config import Settings, get_settings
from core.redis import close_redis, init_redis
from database import close_database, init_database

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format=get_settings().log_format,
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


async def _start_redis() -> None:
    try:
        await init_redis()
    except Exception as e:
        # Only the generation slot depends on Redis
        logger.error(f"Redis unavailable, generation slots disabled: {e}")
        await close_redis()


async def _start_database(settings: Settings) -> None:
    if not settings.is_database_configured:
        logger.warning("Database not configured, project endpoints will return 503")
        return
    try:
        await init_database(settings)
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect Redis and PostgreSQL on startup, release them on shutdown."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

    await _start_redis()
    await _start_database(settings)
    if not settings.is_gemini_configured:
        logger.warning("GOOGLE_API_KEY not configured, generation requests will fail")

    yield

    logger.info("Shutting down")
    await close_redis()
    await close_database()


def create_app() -> FastAPI:
    """Build the FastAPI app with middleware, error handlers and routers."""
    settings = get_settings()
    show_docs = not settings.is_production

    app = FastAPI(
        title=settings.app_name,
        description="Prompt-to-project generation API backed by Gemini",
        version=settings.app_version,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    setup_exception_handlers(app)

    for router in (health_router, generate_router, projects_router, profile_router):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/", tags=["root"])
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if show_docs else None,
            "health": f"{API_PREFIX}/health",
        }

    return app


app = create_app()


def run():
    """Development server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
