"""
Execution Poller.

The "Heartbeat" of the monitor. Every tick reads the newest few entries of the
schedule's execution log and, if the newest one has not been seen before,
turns its output into a scheduled analysis in the feed.

Rules:
1. The first tick after start only records what is newest. History that
   predates the session is never backfilled into the feed.
2. Only the newest entry of a page is considered; the last seen id is the
   single piece of memory kept between ticks.
3. Any failure abandons the tick and leaves the last seen id untouched; the
   next tick simply retries. Nothing is raised to the caller.
4. Overlapping ticks are skipped, not queued.
"""
from __future__ import annotations

import logging
from enum import Enum

from stockmonitor.core.engagement import EngagementTracker
from stockmonitor.core.feed import FeedStore
from stockmonitor.core.normalize import build_record, normalize
from stockmonitor.core.schedule import ScheduleCoordinator
from stockmonitor.models import Source

log = logging.getLogger("core.poller")


class TickOutcome(str, Enum):
    SKIPPED = "skipped"      # previous tick still running, or poller cancelled
    FAILED = "failed"        # fetch failed; retried next tick
    EMPTY = "empty"          # log page was empty
    UNCHANGED = "unchanged"  # newest entry already seen
    PRIMED = "primed"        # first tick: newest id recorded, nothing inserted
    ADVANCED = "advanced"    # new entry consumed


class ExecutionPoller:
    def __init__(
        self,
        client,
        schedule_id: str,
        feed: FeedStore,
        coordinator: ScheduleCoordinator,
        engagement: EngagementTracker,
        page_limit: int = 3,
    ):
        self.client = client
        self.schedule_id = schedule_id
        self.feed = feed
        self.coordinator = coordinator
        self.engagement = engagement
        self.page_limit = page_limit

        self.last_seen_execution_id: str | None = None
        self.busy = False
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    async def tick(self) -> TickOutcome:
        if self.cancelled or self.busy:
            log.debug("poll tick skipped (busy=%s cancelled=%s)", self.busy, self.cancelled)
            return TickOutcome.SKIPPED

        self.busy = True
        try:
            return await self._tick()
        except Exception as e:
            # Background polling never interrupts the session.
            log.warning("poll tick abandoned: %s", e)
            return TickOutcome.FAILED
        finally:
            self.busy = False

    async def _tick(self) -> TickOutcome:
        # Now, we fetch the newest page of the execution log (suspension point).
        page = await self.client.get_logs(self.schedule_id, limit=self.page_limit)
        if self.cancelled:
            return TickOutcome.SKIPPED
        if not page.success:
            log.debug("execution log query reported success: false")
            return TickOutcome.FAILED
        if not page.executions:
            return TickOutcome.EMPTY

        latest = page.executions[0]
        if not latest.id or latest.id == self.last_seen_execution_id:
            return TickOutcome.UNCHANGED

        if self.last_seen_execution_id is None:
            self.last_seen_execution_id = latest.id
            log.info("poller primed at execution %s", latest.id)
            return TickOutcome.PRIMED

        self.last_seen_execution_id = latest.id

        if latest.success and latest.response_output is not None and latest.response_output != "":
            fragment = normalize(latest.response_output)
            if fragment is None:
                log.warning("execution %s produced an unparseable payload; skipping", latest.id)
            else:
                record = build_record(fragment, Source.SCHEDULED)
                if self.feed.insert(record):
                    self.engagement.record_insertion(Source.SCHEDULED, self.engagement.at_top)
        else:
            log.info("execution %s finished without usable output (success=%s)", latest.id, latest.success)

        # Now, we refresh the cached log view whether or not a record was produced.
        self.coordinator.record_executions(page.executions, page.total)
        return TickOutcome.ADVANCED
