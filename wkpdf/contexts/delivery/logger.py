"""
Delivery context logger.

Provides logging interface for delivery context with automatic [deliver] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[deliver]"


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")
