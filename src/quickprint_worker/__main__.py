"""Entry point: ``python -m quickprint_worker``."""

from __future__ import annotations

import asyncio
import logging
import sys

from quickprint_core.exceptions import ConfigurationError

from .app import NotificationWorker
from .log_config import configure_logging
from .settings import WorkerSettings

logger = logging.getLogger("quickprint.worker")


async def _run(settings: WorkerSettings) -> int:
    try:
        worker = NotificationWorker.from_settings(settings)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    return await worker.run()


def main() -> None:
    try:
        settings = WorkerSettings.from_env()
    except ConfigurationError as e:
        configure_logging()
        logger.error("%s", e)
        sys.exit(1)

    configure_logging(settings.log_level, json_output=settings.log_json)
    logger.info("QuickPrint worker starting: %s", settings.summary())
    sys.exit(asyncio.run(_run(settings)))


if __name__ == "__main__":
    main()
