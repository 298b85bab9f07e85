"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from wkpdf.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, binpath: Optional[str] = None) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        binpath: Renderer executable, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"Renderer": binpath} if binpath else None,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(pipeline_id: str, title: str, command: Sequence[str]) -> None:
    """Log start of a render with its command line."""
    _log_info(f"Starting render: {title!r} (pipeline {pipeline_id})")
    _log_debug(f"  Command: {' '.join(command)}")


def log_render_success(
    pipeline_id: str, num_bytes: int, pages: Optional[int], elapsed_time: float, returncode: int
) -> None:
    pages_text = f"{pages} pages" if pages is not None else "page count unavailable"
    _log_success(f"Render succeeded: {num_bytes} bytes, {pages_text} ({elapsed_time:.2f}s)")
    if returncode == 1:
        _log_warning(f"Renderer exited with warnings (pipeline {pipeline_id})")


def log_render_failure(pipeline_id: str, error: Exception, stderr: str = "") -> None:
    """
    Log a failed render.

    The renderer's stderr is dumped raw at DEBUG level so multi-line
    diagnostics keep their formatting in the log file.
    """
    _log_error(f"Render failed (pipeline {pipeline_id}): {type(error).__name__}")
    _log_error(f"  {str(error).splitlines()[0] if str(error) else ''}")

    if stderr:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nRENDERER STDERR:\n{'=' * 80}\n{stderr}\n"
        )
