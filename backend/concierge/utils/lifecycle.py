# /concierge/utils/lifecycle.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from concierge.utils.logging import setup_logging
from concierge.utils.alerting import alerting_service
from concierge.utils.tasks import drain_background_tasks
from concierge.services.db_service import db_service
from concierge.services.cache_service import cache_service
from concierge.services.notification_service import notification_service
from concierge.services.task_service import task_catalog_service
from concierge.services.workflow_service import workflow_service

# This file manages the application's lifespan, handling startup tasks like
# warming caches and shutdown tasks like flushing background work and
# closing connections.

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    setup_logging()

    logger.info("Application starting up...")

    await db_service.create_indexes()
    await task_catalog_service.load_catalog()

    problems = workflow_service.validate_catalogs()
    if problems:
        logger.error(f"Workflow catalogs loaded with {problems} problem(s).")

    logger.info("Application startup complete. Ready to accept requests.")

    yield  # Application is now running

    logger.info("Application shutting down...")

    await drain_background_tasks()
    await notification_service.cleanup()
    await alerting_service.cleanup()
    await cache_service.close()
    db_service.close()
