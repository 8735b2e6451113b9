"""Long-running process entry point (``podtracker-api``)."""

from __future__ import annotations

import logging

import uvicorn

from podtracker.core.logging import setup_logging
from podtracker.core.settings import get_settings

logger = logging.getLogger("podtracker.server")


def main() -> None:
    setup_logging()
    settings = get_settings()
    if not settings.database_url:
        logger.error("DATABASE_URL is not set; refusing to start")
        raise SystemExit(1)

    logger.info(
        "Starting POD Tracker API",
        extra={"environment": settings.app_env, "port": settings.port},
    )
    # log_config=None keeps the JSON logging configured above.
    uvicorn.run(
        "podtracker.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
