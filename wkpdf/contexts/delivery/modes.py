"""
Output delivery modes.

A render always produces bytes; the mode decides what happens to them:

    DOWNLOAD  attachment headers + body (browser saves the file)
    STRING    body only, no headers
    EMBEDDED  inline headers + body (browser shows the PDF)
    SAVE      bytes written to a file path, no body

deliver() renders exactly once per call. Turning a DeliveredOutput into an
HTTP response is left to to_response(), so the rendering core never depends
on a web framework.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Dict, Optional, Union

from fastapi import Response

from wkpdf.contexts.delivery.logger import _log_debug, _log_info, _log_success
from wkpdf.contexts.rendering.exceptions import ConfigurationError, StorageError
from wkpdf.contexts.rendering.pipeline import RenderPipeline
from wkpdf.utils.event_logging import log_render_event
from wkpdf.utils.timestamp import http_date

PDF_MEDIA_TYPE = "application/pdf"

# Responses are never cached by intermediaries
CACHE_HEADERS = {
    "Cache-Control": "public, must-revalidate, max-age=0",
    "Pragma": "public",
    "Expires": "Sat, 26 Jul 1997 05:00:00 GMT",
}


class OutputMode(IntEnum):
    DOWNLOAD = 0
    STRING = 1
    EMBEDDED = 2
    SAVE = 3


@dataclass
class DeliveredOutput:
    """
    What a delivery mode produced.

    Attributes:
        mode: Mode that produced this output
        body: PDF bytes to send (None for SAVE)
        headers: HTTP headers to send with body (empty for STRING and SAVE)
        saved_to: File written by SAVE mode
    """

    mode: OutputMode
    body: Optional[bytes] = None
    headers: Dict[str, str] = field(default_factory=dict)
    saved_to: Optional[Path] = None

    def to_response(self) -> Response:
        """Wrap body and headers in a FastAPI response."""
        if self.body is None:
            raise ConfigurationError(f"Mode {self.mode.name} has no response body")
        # Content-Length is recomputed by the response from the body
        headers = {k: v for k, v in self.headers.items() if k != "Content-Length"}
        return Response(content=self.body, media_type=PDF_MEDIA_TYPE, headers=headers)


def download_headers(filename: Union[str, Path], content_length: int) -> Dict[str, str]:
    """Headers that force the browser to save the PDF as a file."""
    return {
        "Content-Description": "File Transfer",
        **CACHE_HEADERS,
        "Last-Modified": http_date(),
        "Content-Type": PDF_MEDIA_TYPE,
        "Content-Disposition": f'attachment; filename="{Path(filename).name}"',
        "Content-Transfer-Encoding": "binary",
        "Content-Length": str(content_length),
    }


def embedded_headers(filename: Union[str, Path], content_length: int) -> Dict[str, str]:
    """Headers that let the browser display the PDF inline."""
    return {
        "Content-Type": PDF_MEDIA_TYPE,
        **CACHE_HEADERS,
        "Last-Modified": http_date(),
        "Content-Length": str(content_length),
        "Content-Disposition": f'inline; filename="{Path(filename).name}"',
    }


def save_pdf(data: bytes, filename: Union[str, Path]) -> Path:
    """
    Write PDF bytes to filename, overwriting any existing file.

    Raises:
        StorageError: If the file cannot be written
    """
    path = Path(filename)
    try:
        path.write_bytes(data)
    except OSError as e:
        raise StorageError("Could not save PDF", path=path, original_error=e) from e
    return path


def _parse_mode(mode: Union[int, OutputMode]) -> OutputMode:
    try:
        return OutputMode(mode)
    except ValueError:
        raise ConfigurationError(f"Mode: {mode} is not supported")


def deliver(
    pipeline: RenderPipeline,
    mode: Union[int, OutputMode],
    filename: Union[str, Path, None] = None,
) -> DeliveredOutput:
    """
    Render once and deliver the PDF in the requested mode.

    Args:
        pipeline: Pipeline to render
        mode: OutputMode (or its integer value)
        filename: Suggested download name for DOWNLOAD/EMBEDDED, target path for SAVE

    Returns:
        DeliveredOutput describing the body, headers, or saved file

    Raises:
        ConfigurationError: Unsupported mode, or filename missing for a mode that needs it
        Any error raised by RenderPipeline.render()
    """
    mode = _parse_mode(mode)
    if mode != OutputMode.STRING and not filename:
        raise ConfigurationError(f"Mode {mode.name} requires a filename")

    _log_debug(f"Delivering pipeline {pipeline.pipeline_id} as {mode.name}")
    data = pipeline.render()

    if mode == OutputMode.DOWNLOAD:
        output = DeliveredOutput(mode=mode, body=data, headers=download_headers(filename, len(data)))
    elif mode == OutputMode.EMBEDDED:
        output = DeliveredOutput(mode=mode, body=data, headers=embedded_headers(filename, len(data)))
    elif mode == OutputMode.SAVE:
        saved_to = save_pdf(data, filename)
        _log_success(f"PDF saved to: {saved_to}")
        output = DeliveredOutput(mode=mode, saved_to=saved_to)
    else:
        output = DeliveredOutput(mode=mode, body=data)

    _log_info(f"Delivered {len(data)} bytes ({mode.name.lower()})")
    log_render_event(
        event_type="delivered",
        pipeline_id=pipeline.pipeline_id,
        source="delivery",
        events_file=pipeline.events_file,
        mode=mode.name.lower(),
        bytes=len(data),
        saved_to=str(output.saved_to) if output.saved_to else None,
    )

    return output
