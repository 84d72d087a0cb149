"""Formatting helpers for the operator view."""
from __future__ import annotations

from datetime import datetime, timezone

from stockmonitor.models import Direction, now_utc

_LABELS = {
    Direction.UP: "Bullish",
    Direction.DOWN: "Bearish",
    Direction.FLAT: "Neutral",
}

_WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def parse_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        # fromisoformat only learned about "Z" in 3.11.
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def relative_time(value: str | None, now: datetime | None = None) -> str:
    dt = parse_iso(value)
    if dt is None:
        return ""
    seconds = int(((now or now_utc()) - dt).total_seconds())
    if seconds < 0:
        return "just now"
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def _clock(hour: int, minute: int) -> str:
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:{minute:02d} {suffix}"


def format_time(value: str | None) -> str:
    dt = parse_iso(value)
    return _clock(dt.hour, dt.minute) if dt else ""


def format_datetime(value: str | None) -> str:
    dt = parse_iso(value)
    if dt is None:
        return ""
    return f"{dt.strftime('%b')} {dt.day}, {_clock(dt.hour, dt.minute)}"


def direction_label(direction: Direction) -> str:
    return _LABELS[Direction.coerce(direction)]


def cron_to_human(expr: str) -> str:
    """
    Render the common five-field cron shapes as text.
    Anything we do not recognize comes back as the raw expression.
    """
    parts = (expr or "").split()
    if len(parts) != 5:
        return expr
    minute, hour, dom, month, dow = parts
    if dom != "*" or month != "*":
        return expr

    if hour == "*" and dow == "*":
        if minute == "*":
            return "Every minute"
        if minute.startswith("*/") and minute[2:].isdigit():
            n = int(minute[2:])
            return "Every minute" if n == 1 else f"Every {n} minutes"
        if minute.isdigit():
            return "Every hour" if minute == "0" else f"Every hour at :{int(minute):02d}"
        return expr

    if minute.isdigit() and hour.startswith("*/") and hour[2:].isdigit() and dow == "*":
        n = int(hour[2:])
        return "Every hour" if n == 1 else f"Every {n} hours"

    if minute.isdigit() and hour.isdigit():
        at = _clock(int(hour), int(minute))
        if dow == "*":
            return f"Every day at {at}"
        if dow in ("1-5", "MON-FRI", "mon-fri"):
            return f"Every weekday at {at}"
        if dow.isdigit() and int(dow) <= 7:
            return f"Every {_WEEKDAYS[int(dow) % 7]} at {at}"
    return expr
