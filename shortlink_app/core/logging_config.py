"""
Loguru logging configuration.

- Console logging for development (colorized, human-readable)
- Structured JSON logging for everything else
"""

import sys
from typing import Optional

from loguru import logger


def configure_logging(environment: str = "development", level: Optional[str] = None) -> None:
    """
    Configure Loguru for the application.

    Args:
        environment: "development" for console, anything else for JSON.
        level: Minimum level; defaults to DEBUG in development, INFO otherwise.
    """
    # Remove default handler
    logger.remove()

    if environment == "development":
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            ),
            level=(level or "DEBUG").upper(),
            colorize=True,
        )
    else:
        # JSON format for production (machine-parseable)
        logger.add(
            sys.stderr,
            format="{message}",
            level=(level or "INFO").upper(),
            serialize=True,
        )
