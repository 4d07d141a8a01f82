from __future__ import annotations

import sys
from typing import Any

from loguru import logger

from wishlist_export.core.config import Settings

LOG_FORMAT = (
    "{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level: <8} | {extra[component]: <20} | "
    "{message} | {extra}"
)


def configure_logging(settings: Settings) -> None:
    """Route every bound logger to one stdout sink.

    Records carry their component and any bound context. Production emits
    serialized JSON lines, and the test environment logs synchronously.
    """

    logger.remove()
    logger.configure(extra={"component": "wishlist"})
    logger.add(
        sys.stdout,
        level=settings.log_level.upper(),
        enqueue=settings.environment != "test",
        serialize=settings.environment == "production",
        backtrace=False,
        diagnose=False,
        format=LOG_FORMAT,
    )


def get_logger(component: str, **context: Any):
    return logger.bind(component=component, **context)
