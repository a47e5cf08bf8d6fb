"""
Main application entry point for the Electricity Price API service.
Initializes FastAPI app and database, and starts the service.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from src import __version__
from src.api.routes import router as api_router
from src.config import settings
from src.database.service import db_service
from src.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown procedures.
    """
    # Startup
    setup_logging()
    await db_service.init_database()

    yield

    # Shutdown
    await db_service.close()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title="Electricity Price API",
        description="Cached daily electricity prices backed by Energi Data Service",
        version=__version__,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        lifespan=lifespan,
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
