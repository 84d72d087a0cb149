from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from stockmonitor.models import (
    NOT_AVAILABLE,
    AnalysisFragment,
    AnalysisRecord,
    Direction,
    Source,
    now_utc,
)

log = logging.getLogger("core.normalize")


def _as_mapping(payload: Any) -> Mapping | None:
    """
    Decode step. This is the only place normalization can fail.
    Strings are JSON-decoded; mappings and lists pass through; anything else is
    unparseable. Decoded JSON that is not an object yields no fields at all.
    """
    if payload is None:
        return None
    if isinstance(payload, str):
        if not payload.strip():
            return None
        try:
            payload = json.loads(payload)
        except ValueError:
            log.debug("agent payload is not valid JSON: %.80r", payload)
            return None
        return payload if isinstance(payload, Mapping) else {}
    if isinstance(payload, Mapping):
        return payload
    if isinstance(payload, list):
        return {}
    return None


def _text(obj: Mapping, key: str, default: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else default


def normalize(payload: Any) -> AnalysisFragment | None:
    """
    Convert an opaque agent result into an AnalysisFragment.

    Accepts a JSON string, an already-decoded dict, or either of those wrapped
    one level deep in {"result": {...}}. Returns None (Unparseable) only when
    the payload cannot be read as a JSON object at all. Missing or mistyped
    fields fall back to their defaults so schema drift on the agent side never
    breaks the feed.
    """
    obj = _as_mapping(payload)
    if obj is None:
        return None

    # Now, we unwrap the agent's result envelope (one level only).
    inner = obj.get("result")
    if isinstance(inner, Mapping):
        obj = inner

    bullets = obj.get("bullet_points")
    bullet_points = tuple(b for b in bullets if isinstance(b, str)) if isinstance(bullets, list) else ()

    return AnalysisFragment(
        current_price=_text(obj, "current_price", NOT_AVAILABLE),
        price_change=_text(obj, "price_change", NOT_AVAILABLE),
        direction=Direction.coerce(obj.get("direction")),
        bullet_points=bullet_points,
        timestamp=_text(obj, "timestamp", "") or now_utc().isoformat(),
    )


def build_record(fragment: AnalysisFragment, source: Source) -> AnalysisRecord:
    """Give a normalized fragment its local identity and provenance."""
    return AnalysisRecord.from_fragment(fragment, source)
