"""
FastAPI application entry point.

Uses structured logging from core.logging module.
Middleware, exception handlers and routers are wired up in create_app().
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from core.cache import cache
from core.config import get_settings
from core.db import db
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger
from core.security import get_rate_limiter

from .error_handlers import register_exception_handlers
from .middleware.cors import CORSMiddleware
from .middleware.csrf import CSRFMiddleware
from .middleware.maintenance import MaintenanceModeMiddleware
from .middleware.request_id import RequestIDMiddleware
from .middleware.security import (
    BotBlockMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from .routers import auth as auth_router
from .routers import contributions as contributions_router
from .routers import favorites as favorites_router
from .routers import filter_preferences as filter_preferences_router
from .routers import health as health_router
from .routers import health_profile as health_profile_router
from .routers import interactions as interactions_router
from .routers import journal as journal_router
from .routers import medication_cabinet as medication_cabinet_router
from .routers import remedies as remedies_router
from .routers import reviews as reviews_router
from .routers import search_history as search_history_router
from .routers import subscription as subscription_router
from .routers import usage as usage_router
from .scheduler import shutdown_scheduler, start_scheduler

settings = get_settings()
configure_logging(level="DEBUG" if settings.debug else settings.log_level)
logger = get_logger("api")


def validate_config_on_startup() -> None:
    """Log config warnings; errors are fatal in production only."""
    errors, warnings = settings.validate_production_config()
    for warning in warnings:
        logger.warning("config_warning", message=warning)

    if not errors:
        logger.info("config_validation_passed")
        return

    for error in errors:
        logger.error("config_error", error=error)
    if settings.is_production:
        raise RuntimeError("Invalid production configuration: " + "; ".join(errors))
    logger.warning("config_errors_ignored", env=settings.env)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize services on startup and release them on shutdown."""
    logger.info("app_startup", app_name=settings.app_name, env=settings.env)
    validate_config_on_startup()

    db.initialize(settings.database_url)
    if settings.database_url.startswith("sqlite"):
        db.create_all_tables()
    health = db.health_check()
    if not health["healthy"]:
        raise RuntimeError(f"Database unreachable: {health['error']}")
    logger.info("database_initialized", latency_ms=health["latency_ms"])

    cache.initialize()
    if cache.is_available:
        logger.info("cache_initialized", redis_host=settings.redis_host)
    else:
        logger.warning("cache_unavailable")

    get_rate_limiter().initialize()

    if settings.enable_scheduler:
        start_scheduler()
        logger.info("scheduler_started")

    yield

    logger.info("app_shutdown")
    if settings.enable_scheduler:
        shutdown_scheduler()
        logger.info("scheduler_stopped")
    db.reset()


def create_app() -> FastAPI:
    api_prefix = f"{settings.api_prefix}/v1"

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware first, so this list reads
    # innermost to outermost.
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(CSRFMiddleware)
    app.add_middleware(MaintenanceModeMiddleware)
    app.add_middleware(CORSMiddleware)
    app.add_middleware(BotBlockMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router.router, prefix=settings.api_prefix)

    for module in (
        auth_router,
        remedies_router,
        reviews_router,
        favorites_router,
        search_history_router,
        filter_preferences_router,
        interactions_router,
        journal_router,
        medication_cabinet_router,
        health_profile_router,
        subscription_router,
        usage_router,
        contributions_router,
    ):
        app.include_router(module.router, prefix=api_prefix)
    app.include_router(contributions_router.moderation_router, prefix=api_prefix)

    return app


app = create_app()
