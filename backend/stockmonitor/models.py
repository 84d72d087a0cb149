"""
Domain models for the Stock Monitor.
Defines the canonical Analysis record shown in the feed, and the local views
of the remote schedule and its execution log.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

NOT_AVAILABLE = "N/A"

# Helper function to get current UTC time, ensuring timezone awareness
def now_utc() -> datetime:
    # Now, we get the current time.
    # We explicitly enforce UTC to avoid timezone headaches later.
    return datetime.now(timezone.utc)

def new_record_id() -> str:
    return uuid.uuid4().hex


class Direction(str, Enum):
    """
    Closed set of price directions.
    Anything the agent sends that is not one of these becomes FLAT.
    """
    UP = "up"
    DOWN = "down"
    FLAT = "flat"

    @classmethod
    def coerce(cls, value: Any) -> "Direction":
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.FLAT


class Source(str, Enum):
    """Provenance of a feed record. Set by the caller, never read from the payload."""
    MANUAL = "manual"
    SCHEDULED = "scheduled"


class ScheduleState(str, Enum):
    UNKNOWN = "unknown"
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass(frozen=True)
class AnalysisFragment:
    """
    Output of the Normalizer: an analysis without identity or provenance.
    Every field already carries its default when the payload left it out.
    """
    current_price: str = NOT_AVAILABLE
    price_change: str = NOT_AVAILABLE
    direction: Direction = Direction.FLAT
    bullet_points: tuple[str, ...] = ()
    timestamp: str = ""


@dataclass(frozen=True)
class AnalysisRecord:
    """
    One normalized analysis result in the feed.
    Records are immutable once inserted.
    """
    id: str
    current_price: str
    price_change: str
    direction: Direction
    bullet_points: tuple[str, ...]
    timestamp: str
    source: Source

    @classmethod
    def from_fragment(cls, fragment: AnalysisFragment, source: Source, record_id: str | None = None) -> "AnalysisRecord":
        return cls(
            id=record_id or new_record_id(),
            current_price=fragment.current_price,
            price_change=fragment.price_change,
            direction=fragment.direction,
            bullet_points=tuple(fragment.bullet_points),
            timestamp=fragment.timestamp,
            source=source,
        )

    @property
    def dedup_key(self) -> tuple[str, str]:
        # Two analyses for the same instant at the same price are the same analysis.
        return (self.timestamp, self.current_price)


@dataclass(frozen=True)
class ExecutionLogEntry:
    """
    One firing of the remote schedule, as reported by the execution log.
    Read-only: we never mutate these locally.
    """
    id: str
    success: bool
    executed_at: str = ""
    response_output: Any = None

    @classmethod
    def from_wire(cls, raw: dict) -> "ExecutionLogEntry":
        return cls(
            id=str(raw.get("id") or ""),
            success=bool(raw.get("success", False)),
            executed_at=str(raw.get("executed_at") or ""),
            response_output=raw.get("response_output"),
        )


@dataclass(frozen=True)
class ScheduleDescriptor:
    """
    Local cache of the remote recurring job.
    is_active is stale until the next fetch; nothing flips it locally.
    """
    id: str
    is_active: bool
    cron_expression: str = ""
    timezone: str = "UTC"
    next_run_time: str | None = None

    @classmethod
    def from_wire(cls, raw: dict) -> "ScheduleDescriptor":
        return cls(
            id=str(raw.get("id") or ""),
            is_active=bool(raw.get("is_active", False)),
            cron_expression=str(raw.get("cron_expression") or ""),
            timezone=str(raw.get("timezone") or "UTC"),
            next_run_time=raw.get("next_run_time") or None,
        )

    @property
    def state(self) -> ScheduleState:
        return ScheduleState.ACTIVE if self.is_active else ScheduleState.PAUSED
