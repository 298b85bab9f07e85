"""PDF inspection helpers for rendered output."""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PyPDF2 import PdfReader


def page_count(pdf: Union[bytes, Path]) -> Optional[int]:
    """Get page count from PDF bytes or a PDF file, or None if unreadable."""
    try:
        source = BytesIO(pdf) if isinstance(pdf, (bytes, bytearray)) else str(pdf)
        reader = PdfReader(source)
        return len(reader.pages)
    except Exception:
        return None


def looks_like_pdf(data: bytes) -> bool:
    """Check the PDF magic header without parsing the document."""
    return data[:5] == b"%PDF-"
