"""
Process entrypoint.

Runs the FastAPI app under uvicorn. The app lifespan connects to MongoDB
before uvicorn starts accepting requests; on SIGINT/SIGTERM uvicorn stops
accepting connections, waits up to ``SHUTDOWN_GRACE_SECONDS`` for in-flight
requests and then runs the lifespan shutdown, which closes the database
connection.
"""
import logging

import uvicorn

from homepage.config import get_settings
from homepage.core.logging import setup_logging

logger = logging.getLogger(__name__)


def run() -> None:
    """Run the server."""
    settings = get_settings()
    setup_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info("Starbucks Homepage server")
    logger.info(f"Environment: {settings.environment_label}")
    logger.info(f"Listening on {settings.host}:{settings.port}")
    logger.info("=" * 60)

    uvicorn.run(
        "homepage.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=int(settings.shutdown_grace_seconds),
    )


if __name__ == "__main__":
    run()
