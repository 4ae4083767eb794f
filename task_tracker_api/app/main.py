"""
Main entrypoint for the Task Tracker API.

This module assembles the FastAPI application: it sets up logging,
registers the exception handlers and includes the versioned routers.
``create_app`` builds the app, which is then instantiated at module
import time as ``app`` so it can be served directly, e.g.::

    uvicorn task_tracker_api.app.main:app --reload

The application title and version come from ``Settings`` in
``core.config``.
"""

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.exceptions import register_exception_handlers
from .core.logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file on first start and applies pending
        # migrations.
        init_db()

    return app


app = create_app()
