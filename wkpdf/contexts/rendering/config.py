"""
Render configuration.

RenderConfig holds everything a single render needs. It stays mutable until
render time; RenderPipeline runs validate_config() before touching the disk.

Defaults that depend on the host (renderer location, timeout) are read from
the environment via .env:

    WKHTMLTOPDF_BIN   path to the renderer (default: /usr/bin/wkhtmltopdf)
    WKPDF_TIMEOUT_S   render deadline in seconds (default: no deadline)
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv

from wkpdf.contexts.rendering.exceptions import ConfigurationError

load_dotenv()

DEFAULT_BINPATH = os.getenv("WKHTMLTOPDF_BIN", "/usr/bin/wkhtmltopdf")


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got: {value!r}")


def _as_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got: {value!r}")


_timeout_env = os.getenv("WKPDF_TIMEOUT_S")
DEFAULT_TIMEOUT_S = _as_float("WKPDF_TIMEOUT_S", _timeout_env) if _timeout_env else None


class Orientation(str, Enum):
    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"

    @classmethod
    def parse(cls, value: Union[str, "Orientation"]) -> "Orientation":
        """Accept an Orientation or its name/value in any case."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if normalized in (member.value.lower(), member.name.lower()):
                return member
        raise ConfigurationError(
            f"Unknown orientation: {value!r}. Expected one of: {[m.value for m in cls]}"
        )


class PageSize:
    """Common page sizes. Any other size name is passed to the renderer as-is."""

    A4 = "A4"
    LETTER = "Letter"


# Option keys accepted by RenderConfig.from_options()
OPTION_KEYS = {
    "html",
    "orientation",
    "page_size",
    "toc",
    "binpath",
    "grayscale",
    "title",
    "copies",
    "timeout",
    "path",
}


@dataclass
class RenderConfig:
    """
    Configuration for one HTML-to-PDF pipeline.

    Attributes:
        scratch_dir: Absolute directory for the scratch HTML file (required)
        html: HTML content to render (required non-empty at render time)
        orientation: Page orientation
        page_size: Page size name passed to --page-size
        copies: Number of copies (only passed to the renderer when > 1)
        grayscale: Render in grayscale
        toc: Generate a table of contents
        title: PDF document title (required at render time)
        binpath: Path to the renderer executable
        timeout: Render deadline in seconds (None = wait indefinitely)
    """

    scratch_dir: Path
    html: str = ""
    orientation: Orientation = Orientation.PORTRAIT
    page_size: str = PageSize.A4
    copies: int = 1
    grayscale: bool = False
    toc: bool = False
    title: Optional[str] = None
    binpath: str = DEFAULT_BINPATH
    timeout: Optional[float] = DEFAULT_TIMEOUT_S

    def __post_init__(self):
        self.orientation = Orientation.parse(self.orientation)
        self.page_size = str(self.page_size)

    @classmethod
    def from_options(cls, options: Dict[str, Any]) -> "RenderConfig":
        """
        Build a config from an options dict.

        Recognized keys: html, orientation, page_size, toc, binpath, grayscale,
        title, copies, timeout, path. 'path' is required.

        Raises:
            ConfigurationError: If 'path' is missing or an unknown key is given
        """
        unknown = set(options) - OPTION_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown render options: {sorted(unknown)}")

        if options.get("path") is None:
            raise ConfigurationError("Path to directory where to store files is not set")

        kwargs: Dict[str, Any] = {"scratch_dir": Path(options["path"])}

        if "html" in options:
            kwargs["html"] = "" if options["html"] is None else str(options["html"])
        if "orientation" in options:
            kwargs["orientation"] = options["orientation"]
        if "page_size" in options:
            kwargs["page_size"] = options["page_size"]
        if "toc" in options:
            kwargs["toc"] = bool(options["toc"])
        if "grayscale" in options:
            kwargs["grayscale"] = bool(options["grayscale"])
        if "title" in options:
            kwargs["title"] = None if options["title"] is None else str(options["title"])
        if "binpath" in options:
            kwargs["binpath"] = str(options["binpath"])
        if "copies" in options:
            kwargs["copies"] = _as_int("copies", options["copies"])
        if "timeout" in options:
            timeout = options["timeout"]
            kwargs["timeout"] = None if timeout is None else _as_float("timeout", timeout)

        return cls(**kwargs)


@dataclass
class ConfigCheck:
    """
    Result of the pre-render validation pass.

    Attributes:
        errors: Problems that would make a render fail
    """

    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise ConfigurationError("; ".join(self.errors))


def validate_config(config: RenderConfig) -> ConfigCheck:
    """
    Check that a config is complete enough to render.

    HTML length is measured in characters, not bytes.
    """
    check = ConfigCheck()

    if config.html is None or len(config.html) == 0:
        check.errors.append("HTML content not set")
    if not config.title:
        check.errors.append("Title is not set")
    if config.copies < 1:
        check.errors.append(f"copies must be a positive integer, got: {config.copies}")
    if config.timeout is not None and config.timeout <= 0:
        check.errors.append(f"timeout must be positive, got: {config.timeout}")

    return check
