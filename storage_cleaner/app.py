"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .api.router import api_router
from .services.scan_manager import scan_manager

# Configure logging for our modules
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
logging.getLogger("storage_cleaner").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.index_on_startup:
        indexed = await scan_manager.reindex()
        logger.info("Startup index built: %d files", indexed)
    yield
    scan_manager.source.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="storage-cleaner",
        version="0.1.0",
        description="Storage scan and cleanup advisor",
        lifespan=lifespan,
    )
    app.include_router(api_router, prefix="/api")
    return app
