"""
HTML to PDF render pipeline.

One RenderPipeline owns one config and one scratch file. A render walks
through these states:

    IDLE -> VALIDATING -> WRITING -> EXECUTING -> CLASSIFYING -> DONE | FAILED

The scratch file is removed once the renderer has finished, on success and
on every failure that happened after it was written.

A pipeline instance must not be rendered from several threads at once (the
renders would race on the scratch file). Separate instances share nothing and
can run in parallel.
"""

import time
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from wkpdf.contexts.rendering.command import build_command, build_help_command
from wkpdf.contexts.rendering.config import (
    ConfigCheck,
    Orientation,
    RenderConfig,
    _as_int,
    validate_config,
)
from wkpdf.contexts.rendering.exceptions import ProcessError, RenderError, WkpdfError
from wkpdf.contexts.rendering.logger import (
    log_render_failure,
    log_render_start,
    log_render_success,
)
from wkpdf.contexts.rendering.process import ProcessResult, run_process
from wkpdf.contexts.rendering.scratch import ScratchFileStore
from wkpdf.utils.event_logging import log_render_event
from wkpdf.utils.pdf_processing import looks_like_pdf, page_count

# Exit codes above this are fatal; 1 means "finished with warnings"
MAX_NONFATAL_RETURNCODE = 1


class RenderState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    WRITING = "writing"
    EXECUTING = "executing"
    CLASSIFYING = "classifying"
    DONE = "done"
    FAILED = "failed"


def classify_result(result: ProcessResult) -> bytes:
    """
    Decide whether a renderer invocation succeeded.

    Checks, in order:
    1. stderr mentions "error" (any case)  -> RenderError
    2. stdout is empty                     -> RenderError
    3. exit code above 1                   -> ProcessError
    Otherwise stdout is the PDF.

    The stderr check is a plain substring test. It flags successful renders
    whose diagnostics merely echo the word, and misses failures reported
    without it.

    A renderer killed by a signal has a negative return code. If it wrote any
    output before dying, that output is returned as the PDF.

    Raises:
        RenderError: Renderer reported an error or produced no data
        ProcessError: Renderer exited with a fatal status
    """
    if "error" in result.stderr.lower():
        raise RenderError("System error", stderr=result.stderr)

    if len(result.stdout) == 0:
        raise RenderError("Renderer didn't return any data", stderr=result.stderr)

    if result.returncode > MAX_NONFATAL_RETURNCODE:
        raise ProcessError(result.returncode, stderr=result.stderr)

    return result.stdout


class RenderPipeline:
    """
    Renders the HTML in a RenderConfig to PDF bytes with an external renderer.

    The scratch directory is validated at construction, before any process
    is spawned.

    Args:
        config: Render configuration
        events_file: Optional JSON Lines file for render events
                     (default: RENDER_EVENTS_FILE from the environment)

    Example:
        >>> pipeline = RenderPipeline.from_options(
        ...     {"html": "<p>hi</p>", "title": "Greeting", "path": "/tmp"}
        ... )
        >>> pdf_bytes = pipeline.render()
    """

    def __init__(self, config: RenderConfig, events_file: Optional[Path] = None):
        self.config = config
        self.scratch = ScratchFileStore(config.scratch_dir)
        self.pipeline_id = uuid.uuid4().hex[:8]
        self.state = RenderState.IDLE
        self.events_file = events_file

    @classmethod
    def from_options(
        cls, options: Dict[str, Any], events_file: Optional[Path] = None
    ) -> "RenderPipeline":
        """Build a pipeline from an options dict (see RenderConfig.from_options)."""
        return cls(RenderConfig.from_options(options), events_file=events_file)

    # Fluent setters

    def set_html(self, html: Optional[str]) -> "RenderPipeline":
        self.config.html = "" if html is None else str(html)
        return self

    def set_title(self, title: Optional[str]) -> "RenderPipeline":
        self.config.title = None if title is None else str(title)
        return self

    def set_orientation(self, orientation: Union[str, Orientation]) -> "RenderPipeline":
        self.config.orientation = Orientation.parse(orientation)
        return self

    def set_page_size(self, page_size: str) -> "RenderPipeline":
        self.config.page_size = str(page_size)
        return self

    def set_copies(self, copies: int) -> "RenderPipeline":
        self.config.copies = _as_int("copies", copies)
        return self

    def set_toc(self, toc: bool = True) -> "RenderPipeline":
        self.config.toc = bool(toc)
        return self

    def set_grayscale(self, grayscale: bool = True) -> "RenderPipeline":
        self.config.grayscale = bool(grayscale)
        return self

    def set_binpath(self, binpath: Union[str, Path]) -> "RenderPipeline":
        self.config.binpath = str(binpath)
        return self

    @property
    def scratch_path(self) -> Optional[Path]:
        """Path of the scratch file, or None before the first render."""
        return self.scratch.path

    def validate(self) -> ConfigCheck:
        return validate_config(self.config)

    def render(self) -> bytes:
        """
        Render the configured HTML and return the PDF bytes.

        Returns:
            Non-empty PDF bytes

        Raises:
            ConfigurationError: html or title missing, or invalid copies/timeout
            StorageError: Scratch file could not be written
            SpawnError: Renderer could not be launched
            RenderTimeoutError: Renderer exceeded config.timeout
            RenderError: Renderer reported an error or produced no data
            ProcessError: Renderer exited with status 2 or above
        """
        start_time = time.time()

        try:
            self.state = RenderState.VALIDATING
            self.validate().raise_if_invalid()

            self.state = RenderState.WRITING
            with self.scratch.session(self.config.html) as html_path:
                self.state = RenderState.EXECUTING
                command = build_command(self.config, html_path)
                log_render_start(self.pipeline_id, self.config.title, command)
                self._event("render_started", command=command)

                result = run_process(command, timeout=self.config.timeout)

                self.state = RenderState.CLASSIFYING
                output = classify_result(result)
        except WkpdfError as e:
            self.state = RenderState.FAILED
            log_render_failure(self.pipeline_id, e, stderr=getattr(e, "stderr", ""))
            self._event(
                "render_failed",
                error=type(e).__name__,
                message=str(e).splitlines()[0] if str(e) else "",
                elapsed_s=round(time.time() - start_time, 3),
            )
            raise

        self.state = RenderState.DONE
        elapsed_s = time.time() - start_time
        pages = page_count(output) if looks_like_pdf(output) else None

        log_render_success(self.pipeline_id, len(output), pages, elapsed_s, result.returncode)
        self._event(
            "render_completed",
            bytes=len(output),
            page_count=pages,
            returncode=result.returncode,
            elapsed_s=round(elapsed_s, 3),
        )

        return output

    def get_help(self) -> str:
        """Return the renderer's --extended-help output verbatim."""
        result = run_process(build_help_command(self.config.binpath), timeout=self.config.timeout)
        return result.stdout.decode("utf-8", errors="replace")

    def _event(self, event_type: str, **fields) -> None:
        log_render_event(
            event_type=event_type,
            pipeline_id=self.pipeline_id,
            source="rendering",
            events_file=self.events_file,
            **fields,
        )
