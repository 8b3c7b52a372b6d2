"""
Main entrypoint for the Library API.

``create_app`` assembles the FastAPI application: it configures
logging, creates the persistence gateway, mounts the GraphQL router at
``/graphql`` and registers a health check.  The app is instantiated at
module import time as ``app`` so it can be served directly, e.g.::

    uvicorn library_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI

from .core.config import Settings, settings
from .core.db import SQLiteGateway, get_database_path
from .core.logging_config import setup_logging
from .graphql import create_graphql_router


def create_app(app_settings: Optional[Settings] = None, gateway: Optional[SQLiteGateway] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the environment-derived defaults.
    gateway : Optional[SQLiteGateway]
        Persistence gateway to use.  By default one is created for
        ``app_settings.database_url``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    # Initialise logging before anything else so that the modules below
    # can safely log messages.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    if gateway is None:
        gateway = SQLiteGateway(get_database_path(app_settings.database_url))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the database file on first start and applies pending
        # migrations.
        gateway.init_db()
        logging.getLogger(__name__).info(
            "%s %s ready, database at %s",
            app_settings.project_name,
            app_settings.api_version,
            gateway.database_path,
        )
        yield

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version, lifespan=lifespan)
    app.state.settings = app_settings
    app.state.gateway = gateway

    app.include_router(create_graphql_router(app_settings.debug), prefix="/graphql")

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"status": "ok", "version": app_settings.api_version}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
