"""
Shared utilities for wkpdf.

Common functionality used across contexts:
- Logger setup with provenance
- Render event log (JSON Lines)
- PDF inspection
- Timestamps
"""

from wkpdf.utils.timestamp import http_date, now, now_exact

__all__ = ["http_date", "now", "now_exact"]
