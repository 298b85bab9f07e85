"""
Render event logging utilities (Tier 2 logging).

Appends one JSON object per render event to a JSON Lines file so that render
history can be filtered by event type or pipeline without parsing the
detailed session logs.

For detailed within-context logging (Tier 1), use wkpdf.utils.logger instead.

Usage:
    from wkpdf.utils.event_logging import log_render_event

    log_render_event(
        event_type="render_completed",
        pipeline_id="3f2a9c0e",
        source="rendering",
        bytes=20431,
        elapsed_s=0.84,
    )

Events are only written when RENDER_EVENTS_FILE is set (or an explicit
events_file is passed).
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from wkpdf.utils.timestamp import now_exact

load_dotenv()
_events_file_env = os.getenv("RENDER_EVENTS_FILE")
RENDER_EVENTS_FILE = Path(_events_file_env) if _events_file_env else None


def log_render_event(
    event_type: str,
    pipeline_id: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> None:
    """
    Append an event to the render event log.

    Args:
        event_type: Type of event (e.g., "render_started", "render_failed")
        pipeline_id: Identifier of the pipeline that produced the event
        source: Event source (e.g., "rendering", "delivery", "cli")
        events_file: Override for RENDER_EVENTS_FILE
        **extra_fields: Additional event-specific fields
    """
    events_file = events_file or RENDER_EVENTS_FILE
    if events_file is None:
        return

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "pipeline_id": pipeline_id,
        "source": source,
        **extra_fields,
    }

    # A broken event log never fails the render that produced the event
    events_file = Path(events_file)
    try:
        events_file.parent.mkdir(parents=True, exist_ok=True)
        with open(events_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, default=str) + "\n")
    except OSError as e:
        logger.warning(f"Could not write render event {event_type!r} to {events_file}: {e}")


def get_recent_events(
    n: int = 10,
    pipeline_id: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> List[dict]:
    """
    Get the last n events from the render event log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        pipeline_id: Filter to only events for this pipeline (optional)
        event_type: Filter to only events of this type (optional)
        events_file: Override for RENDER_EVENTS_FILE

    Returns:
        List of event dicts (most recent last)
    """
    events_file = events_file or RENDER_EVENTS_FILE
    if events_file is None or not Path(events_file).exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if pipeline_id:
        events = [e for e in events if e.get("pipeline_id") == pipeline_id]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events
