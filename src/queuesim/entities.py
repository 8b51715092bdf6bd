"""
queuesim domain entities.

- JobRecord: one captured submission, immutable once appended to the log
- BatchRecord: the persisted property set of a batch in the registry
"""

import json
import secrets
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from unittest.mock import ANY

from .matching import ValueMatcher


def generate_jid() -> str:
    """Generate a new job id (24 hex characters)."""
    return secrets.token_hex(12)


def generate_bid() -> str:
    """Generate a new URL-safe batch id."""
    return secrets.token_urlsafe(10)


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def normalize_arguments(arguments) -> list:
    """
    Normalize job arguments through a JSON round-trip.

    What a real backend would store is what gets compared: tuples become
    lists, enums their value, datetimes ISO strings and any other
    non-JSON value its str().
    """
    return json.loads(json.dumps(list(arguments), default=_json_default))


def _normalize_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    # JSON object keys are strings: 1 -> "1", True -> "true", None -> "null"
    return next(iter(json.loads(json.dumps({key: 0}))))


def normalize_expected(value: Any) -> Any:
    """
    Normalize an expected value exactly like normalize_arguments() does.

    Value matchers and unittest.mock.ANY are patterns, not data: they are
    kept as-is wherever they appear so they can still match.
    """
    if value is ANY or isinstance(value, ValueMatcher):
        return value
    if isinstance(value, (list, tuple)):
        return [normalize_expected(item) for item in value]
    if isinstance(value, dict):
        return {_normalize_key(k): normalize_expected(v) for k, v in value.items()}
    if value is None or isinstance(value, (str, bool, int, float)):
        return json.loads(json.dumps(value))
    return normalize_expected(_json_default(value))


@dataclass(frozen=True)
class JobRecord:
    """
    A single job submission captured by the simulator.

    Immutable: the log is append-only and diffed by position/jid.
    """

    jid: str
    worker: str
    args: list
    queue: str = "default"
    scheduled_at: Optional[float] = None
    bid: Optional[str] = None
    created_at: Optional[float] = None
    enqueued_at: Optional[float] = None

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_at is not None

    def to_dict(self) -> dict:
        """Wire-like representation (keys follow the common job payload names)."""
        payload = {
            "jid": self.jid,
            "class": self.worker,
            "queue": self.queue,
            "args": list(self.args),
            "created_at": self.created_at,
            "enqueued_at": self.enqueued_at,
        }
        if self.scheduled_at is not None:
            payload["at"] = self.scheduled_at
        if self.bid is not None:
            payload["bid"] = self.bid
        return payload


@dataclass
class BatchRecord:
    """
    Registry-side properties of a batch.

    `parent_bid` is a back-reference only; a batch never owns its parent.
    `callbacks` maps an event name to an ordered list of {target: options}.
    """

    bid: str
    created_at: float
    description: Optional[str] = None
    parent_bid: Optional[str] = None
    callbacks: dict = field(default_factory=dict)
    jids: list = field(default_factory=list)
    invalidated: bool = False

    def to_dict(self) -> dict:
        return {
            "bid": self.bid,
            "created_at": self.created_at,
            "description": self.description,
            "parent": self.parent_bid,
            "callbacks": {event: list(targets) for event, targets in self.callbacks.items()},
            "jids": list(self.jids),
            "invalidated": self.invalidated,
        }
