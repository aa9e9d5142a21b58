"""
Dance Schedule API - Main Application Entry Point

Publishes a recurring dance-event schedule:
- Locations, events and their dated occurrences
- Filtered, date-bucketed schedule views
- Referential integrity on delete (events cascade, locations are protected)
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dance_schedule.core.config import get_settings
from dance_schedule.core.logging import setup_logging, get_logger
from dance_schedule.core.metrics import metrics_endpoint
from dance_schedule.api.router import api_router
from dance_schedule.api.middleware import RequestLoggingMiddleware
from dance_schedule.api.error_handlers import register_error_handlers
from dance_schedule.db import session as db_session

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    manager = db_session.init_db(settings)
    if settings.AUTO_CREATE_SCHEMA:
        await manager.create_schema()
        logger.info("database_schema_created")

    yield

    await db_session.close_db()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Schedule of locations, events and occurrences for a dance community",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_error_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    manager = db_session.db_manager
    database_ok = manager is not None and await manager.health_check()
    return {
        "status": "healthy" if database_ok else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": database_ok,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
