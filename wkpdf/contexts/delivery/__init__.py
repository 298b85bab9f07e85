"""
Delivery Context

Responsibilities:
- Hands rendered PDF bytes to the caller in one of four modes
  (download, string, embedded, save)
- Builds the HTTP headers for download and embedded modes
- Writes PDFs to disk for save mode

Owns: output modes, response headers, saved files
Never: Runs the renderer directly (always goes through RenderPipeline)
"""

from wkpdf.contexts.delivery.modes import (
    DeliveredOutput,
    OutputMode,
    deliver,
    download_headers,
    embedded_headers,
    save_pdf,
)

__all__ = [
    "DeliveredOutput",
    "OutputMode",
    "deliver",
    "download_headers",
    "embedded_headers",
    "save_pdf",
]
