"""
Pydantic schemas for the Stock Monitor API.
Defines the data validation and serialization rules for API requests and responses.
"""
from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field

from stockmonitor.core import display
from stockmonitor.models import AnalysisRecord, ExecutionLogEntry, ScheduleDescriptor

class AnalysisOut(BaseModel):
    """
    Schema for returning one feed entry.
    It decouples the internal record from the external API Contract,
    and carries the pre-formatted strings the view displays.
    """
    id: str
    current_price: str
    price_change: str
    direction: str
    direction_label: str
    bullet_points: list[str]
    timestamp: str
    time: str
    relative_time: str
    source: str

    @classmethod
    def from_record(cls, r: AnalysisRecord, now: datetime | None = None) -> "AnalysisOut":
        return cls(
            id=r.id,
            current_price=r.current_price,
            price_change=r.price_change,
            direction=r.direction.value,
            direction_label=display.direction_label(r.direction),
            bullet_points=list(r.bullet_points),
            timestamp=r.timestamp,
            time=display.format_time(r.timestamp),
            relative_time=display.relative_time(r.timestamp, now),
            source=r.source.value,
        )


class FeedOut(BaseModel):
    records: list[AnalysisOut]
    latest: AnalysisOut | None = None
    sample: bool
    sample_mode: bool
    unseen_update: bool
    scroll_to_top: bool
    last_updated: datetime | None = None
    last_updated_relative: str = ""


class ViewportIn(BaseModel):
    scroll_offset: int = Field(0, ge=0)


class SampleModeIn(BaseModel):
    enabled: bool


class AcknowledgeOut(BaseModel):
    scroll_to_top: bool


class RunAnalysisOut(BaseModel):
    record: AnalysisOut
    duplicate: bool


class ScheduleOut(BaseModel):
    id: str
    is_active: bool
    cron_expression: str
    timezone: str
    next_run_time: str | None = None

    @classmethod
    def from_descriptor(cls, d: ScheduleDescriptor) -> "ScheduleOut":
        return cls(
            id=d.id,
            is_active=d.is_active,
            cron_expression=d.cron_expression,
            timezone=d.timezone,
            next_run_time=d.next_run_time,
        )


class ScheduleStatusOut(BaseModel):
    state: str
    schedule: ScheduleOut | None = None
    cron_text: str
    toggling: bool
    error: str | None = None


class ExecutionOut(BaseModel):
    id: str
    success: bool
    executed_at: str
    executed_at_display: str

    @classmethod
    def from_entry(cls, e: ExecutionLogEntry) -> "ExecutionOut":
        return cls(
            id=e.id,
            success=e.success,
            executed_at=e.executed_at,
            executed_at_display=display.format_datetime(e.executed_at),
        )


class ExecutionLogOut(BaseModel):
    executions: list[ExecutionOut]
    total: int


class PollOut(BaseModel):
    outcome: str
    last_seen_execution_id: str | None = None
