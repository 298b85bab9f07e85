"""
Session logging for wkpdf (Tier 1, detailed logs).

A session is one CLI invocation. Its log goes to <log_dir>/<context>.log at
DEBUG level, and INFO and above is echoed to stderr so stdout stays free for
command output. Every session log opens with a provenance block recording
how it was started.

Context wrappers with message prefixes live in contexts/{context}/logger.py.
"""

import os
import platform
import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {message}"
CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}"
BANNER_WIDTH = 80


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, object]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Replace all loguru handlers with a file sink and a console sink for one session.

    Args:
        context_name: Context identifier, used as the log file stem (e.g., "render")
        log_dir: Session directory, created if missing
        extra_provenance: Additional entries for the provenance block
        console_level: Minimum level echoed to stderr

    Returns:
        Path to the session log file

    Example:
        log_file = setup_logger(
            "render",
            Path("outs/logs/render_20251114_123456"),
            extra_provenance={"Renderer": "/usr/bin/wkhtmltopdf"},
        )
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{context_name}.log"

    logger.configure(
        handlers=[
            {"sink": log_file, "format": FILE_FORMAT, "level": "DEBUG", "encoding": "utf-8"},
            {"sink": sys.stderr, "format": CONSOLE_FORMAT, "level": console_level, "colorize": True},
        ]
    )

    log_provenance(extra_provenance)
    return log_file


def collect_provenance(extra: Optional[Dict[str, object]] = None) -> Dict[str, object]:
    """Describe the running process: entry point, arguments, directory, interpreter."""
    info: Dict[str, object] = {
        "Script": sys.argv[0],
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "Python": platform.python_version(),
        "PID": os.getpid(),
    }
    if extra:
        info.update(extra)
    return info


def log_provenance(extra: Optional[Dict[str, object]] = None) -> None:
    """Write the provenance block to the current handlers at INFO level."""
    info = collect_provenance(extra)
    width = max(len(key) for key in info)

    logger.info("=" * BANNER_WIDTH)
    for key, value in info.items():
        logger.info(f"{key + ':': <{width + 1}} {value}")
    logger.info("=" * BANNER_WIDTH)
