"""
Application lifespan handling.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from wacontacts.core.config import settings
from wacontacts.services.imports.store import get_session_store

logger = logging.getLogger("wacontacts")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and drop all open import sessions on shutdown."""
    logger.info(f"Starting {settings.PROJECT_NAME} (contacts API: {settings.CONTACTS_API_URL})")
    yield
    store = get_session_store()
    if len(store):
        logger.info(f"Discarding {len(store)} open import sessions")
    store.clear()
    logger.info(f"{settings.PROJECT_NAME} shutdown complete")
