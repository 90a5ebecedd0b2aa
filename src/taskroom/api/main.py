"""FastAPI application factory and configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi_keycloak_middleware import setup_keycloak_middleware

from taskroom.cache import close_redis, init_redis
from taskroom.db.session import close_db, init_db
from taskroom.logging_setup import configure_logging

from .auth import get_keycloak_config, user_mapper
from .config import get_api_settings, get_auth_settings, get_database_settings
from .dependencies import set_ws_manager
from .handlers import register_exception_handlers
from .middleware import RequestContextMiddleware
from .routers import (
    health_router,
    projects_router,
    tasks_router,
    users_router,
    websocket_router,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.

    Args:
        app: FastAPI application

    Yields:
        None
    """
    # Startup
    logger.info("starting_application")
    init_db(get_database_settings())
    await init_redis()

    yield

    # Shutdown
    logger.info("shutting_down_application")
    set_ws_manager(None)
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_api_settings()
    configure_logging(settings.log_level, json_logs=not settings.debug)

    app = FastAPI(
        title=settings.title,
        description=settings.description,
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "users", "description": "User profiles"},
            {"name": "projects", "description": "Projects and collaborators"},
            {"name": "tasks", "description": "Task management"},
            {"name": "websocket", "description": "Live project rooms"},
        ],
    )

    # Register middleware (order matters - first added = last executed)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestContextMiddleware)

    api_prefix = settings.api_prefix

    if get_auth_settings().auth_enabled:
        # WebSocket tokens are checked by the socket handler itself
        setup_keycloak_middleware(
            app,
            keycloak_configuration=get_keycloak_config(),
            user_mapper=user_mapper,
            exclude_patterns=[
                "/health",
                "/ready",
                "/docs",
                "/redoc",
                "/openapi.json",
                f"{api_prefix}/ws",
            ],
        )

    # CORS
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Register exception handlers
    register_exception_handlers(app)

    # Health checks (no prefix)
    app.include_router(health_router)

    # API routes
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(projects_router, prefix=api_prefix)
    app.include_router(tasks_router, prefix=api_prefix)

    # WebSocket (under api prefix)
    app.include_router(websocket_router, prefix=api_prefix)

    logger.info(
        "application_configured",
        title=settings.title,
        version=settings.version,
        debug=settings.debug,
    )

    return app


# Application instance
app = create_app()
