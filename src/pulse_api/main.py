"""FastAPI application entry point."""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI

from common.cli_helpers import setup_logging
from common.config import get_config
from pulse_api.routers import feed, health, pulse, search

load_dotenv()

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="AI Pulse API",
        description="Read-only API for personalized feeds, trending topics and article search",
        version="1.0.0",
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(feed.router)
    app.include_router(pulse.router)
    app.include_router(search.router)

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    setup_logging()
    config = get_config().api
    logger.info("Starting AI Pulse API on %s:%d", config.host, config.port)
    uvicorn.run(
        "pulse_api.main:app",
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
