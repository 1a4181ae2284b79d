"""
Application lifecycle events
Handles startup and shutdown tasks
"""

from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool
import logging
from contextlib import asynccontextmanager

from .database import run_migrations, close_db
from .monitoring import setup_logging
from .config import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Handles startup and shutdown events
    """
    # Startup
    try:
        # Setup logging
        setup_logging()
        logger.info(f"Starting {settings.APP_NAME}...")

        # Bring the schema up to date
        if settings.RUN_MIGRATIONS_ON_STARTUP:
            await run_in_threadpool(run_migrations)

        logger.info(f"{settings.APP_NAME} started successfully")

        yield

    finally:
        # Shutdown
        logger.info(f"Shutting down {settings.APP_NAME}...")

        # Close database connections
        await close_db()

        logger.info(f"{settings.APP_NAME} shutdown complete")
