"""
Feed Store.

Concept: Prepend-only, content-deduplicated list.
The newest analysis is always first. A record whose (timestamp, current_price)
pair is already in the feed is dropped silently. Nothing is ever updated in
place or evicted; the feed lives as long as the monitoring session.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from stockmonitor.models import AnalysisRecord, Direction, Source, now_utc

log = logging.getLogger("core.feed")


def sample_records(now: datetime | None = None) -> list[AnalysisRecord]:
    """
    Illustrative records shown while the feed is still empty and sample mode is on.
    Timestamps are anchored to `now` so the same input always yields the same set.
    """
    now = now or now_utc()

    def ago(minutes: int) -> str:
        return (now - timedelta(minutes=minutes)).isoformat()

    return [
        AnalysisRecord(
            id="sample-1",
            current_price="$421.35",
            price_change="+$4.10 (+0.98%)",
            direction=Direction.UP,
            bullet_points=(
                "MSFT shares gained nearly 1% in early trading, building on momentum from strong cloud revenue guidance.",
                "Azure growth rate accelerated to 33% YoY, exceeding analyst expectations of 30%.",
                "Institutional buying pressure remains robust with above-average volume.",
            ),
            timestamp=ago(2),
            source=Source.MANUAL,
        ),
        AnalysisRecord(
            id="sample-2",
            current_price="$417.25",
            price_change="-$2.15 (-0.51%)",
            direction=Direction.DOWN,
            bullet_points=(
                "MSFT dipped modestly amid broader tech sector rotation as investors moved toward defensive positions.",
                "Despite the pullback, the stock remains well above its 50-day moving average of $410.",
            ),
            timestamp=ago(12),
            source=Source.SCHEDULED,
        ),
        AnalysisRecord(
            id="sample-3",
            current_price="$419.40",
            price_change="+$0.05 (+0.01%)",
            direction=Direction.FLAT,
            bullet_points=(
                "MSFT traded essentially flat as the market awaits key CPI data tomorrow.",
                "Options activity suggests traders are positioning for a breakout above $425 resistance.",
                "AI infrastructure capex guidance remains a key focus for upcoming earnings call.",
            ),
            timestamp=ago(22),
            source=Source.SCHEDULED,
        ),
    ]


class FeedStore:
    def __init__(self, sample_mode: bool = False):
        self.sample_mode = sample_mode
        self.last_updated: datetime | None = None
        self._records: list[AnalysisRecord] = []
        self._keys: set[tuple[str, str]] = set()

    def __len__(self) -> int:
        return len(self._records)

    def insert(self, record: AnalysisRecord) -> bool:
        """
        Prepend a record. Returns False (and changes nothing) for a duplicate.
        """
        key = record.dedup_key
        if key in self._keys:
            log.debug("duplicate analysis dropped: timestamp=%s price=%s", *key)
            return False
        self._records.insert(0, record)
        self._keys.add(key)
        self.last_updated = now_utc()
        log.info("feed += %s analysis at %s (%s)", record.source.value, record.timestamp, record.current_price)
        return True

    def current_records(self) -> tuple[AnalysisRecord, ...]:
        return tuple(self._records)

    def display_records(self, now: datetime | None = None) -> tuple[AnalysisRecord, ...]:
        """
        What the operator sees: the real feed, or the sample set when the feed is
        empty and sample mode is on. The sample set is never stored.
        """
        if not self._records and self.sample_mode:
            return tuple(sample_records(now))
        return self.current_records()

    def latest(self, now: datetime | None = None) -> AnalysisRecord | None:
        shown = self.display_records(now)
        return shown[0] if shown else None
