"""Entry point for the Library API server.

Starts the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``4000``); database location, secret key and the other settings
are read from the environment as described in
``library_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from library_api.app.core.config import settings
from library_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Serving GraphQL at http://%s:%s/graphql", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
