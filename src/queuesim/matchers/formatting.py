"""
Text rendering for matcher descriptions and failure diagnostics.
"""

import json
from datetime import datetime
from typing import Any, Optional

from ..batch import Batch
from ..clock import Instant, Interval, to_seconds
from ..matching import ValueMatcher


class _AnyBatch:
    """Sentinel for within_batch() without argument: any batch will do."""

    def __repr__(self) -> str:
        return "ANY_BATCH"


ANY_BATCH = _AnyBatch()

_UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


def _plural(count, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_interval(interval: Interval) -> str:
    """
    Human form of an interval: "10 minutes", "1 hour and 5 minutes".
    """
    remaining = to_seconds(interval)
    parts = []
    for unit, size in _UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(_plural(int(count), unit))
    if remaining or not parts:
        seconds = int(remaining) if float(remaining).is_integer() else round(remaining, 3)
        parts.append(_plural(seconds, "second"))

    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts[:-1]) + " and " + parts[-1]


def format_timestamp(timestamp: Optional[float]) -> str:
    """Local time with offset, e.g. "2022-08-10 00:05:00 +0200"."""
    if timestamp is None:
        return ""
    return datetime.fromtimestamp(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S %z")


def format_instant(instant: Instant) -> str:
    """
    The instant as the caller gave it: aware datetimes keep their own
    offset, naive datetimes and epoch numbers render in local time.
    """
    if isinstance(instant, datetime) and instant.tzinfo is not None:
        return instant.strftime("%Y-%m-%d %H:%M:%S %z")
    if isinstance(instant, datetime):
        return instant.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
    return format_timestamp(instant)


def render_value(value: Any) -> str:
    """JSON-like rendering that keeps matcher patterns readable."""
    if isinstance(value, ValueMatcher):
        return value.description()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    if isinstance(value, dict):
        items = ", ".join(f"{render_value(k)}: {render_value(v)}" for k, v in value.items())
        return "{" + items + "}"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (int, float)):
        return repr(value)
    return repr(value)


def render_batch(value: Any) -> str:
    if value is ANY_BATCH:
        return "to be present"
    if isinstance(value, str):
        return f"<Batch bid: {json.dumps(value)}>"
    if isinstance(value, Batch):
        return f"<Batch bid: {json.dumps(value.bid)}>"
    description = getattr(value, "description", None)
    if callable(description):
        return description()
    return repr(value)
