"""
Monitoring session.

One MonitorSession exists per monitoring view. It owns every piece of mutable
state (feed, schedule cache, last seen execution id, engagement flag) and the
APScheduler job that drives the poller. Nothing here is a module-level
singleton; tearing the session down tears all of it down.
"""
from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from stockmonitor.config import Settings
from stockmonitor.core.engagement import EngagementTracker
from stockmonitor.core.feed import FeedStore
from stockmonitor.core.poller import ExecutionPoller
from stockmonitor.core.schedule import ScheduleCoordinator
from stockmonitor.core.trigger import ManualTrigger

log = logging.getLogger("core.session")

POLL_JOB_ID = "poll-executions"


class MonitorSession:
    def __init__(self, settings: Settings, agent_client, scheduler_client):
        self.settings = settings
        self.feed = FeedStore(sample_mode=settings.sample_mode)
        self.engagement = EngagementTracker(settings.scroll_threshold_px)
        self.coordinator = ScheduleCoordinator(
            scheduler_client,
            agent_id=settings.agent_id,
            schedule_id=settings.schedule_id,
            log_page_limit=settings.log_page_limit,
        )
        self.poller = ExecutionPoller(
            scheduler_client,
            schedule_id=settings.schedule_id,
            feed=self.feed,
            coordinator=self.coordinator,
            engagement=self.engagement,
            page_limit=settings.poll_page_limit,
        )
        self.trigger = ManualTrigger(
            agent_client,
            agent_id=settings.agent_id,
            instruction=settings.analysis_instruction,
            feed=self.feed,
            engagement=self.engagement,
        )
        self.scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    async def start(self) -> None:
        """
        Bring the session up: load schedule status and the log view, then start
        the poll job. Must be awaited from inside the event loop.
        """
        if self.running:
            return
        await self.coordinator.fetch_status()
        await self.coordinator.load_logs()

        # Now, we schedule the poll tick.
        # max_instances=1 makes APScheduler drop a tick that would overlap the
        # previous one; the poller's busy flag covers manual ticks as well.
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.scheduler.add_job(
            self.poller.tick,
            "interval",
            seconds=self.settings.poll_interval_seconds,
            id=POLL_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        log.info("Monitor session started; polling every %d seconds.", self.settings.poll_interval_seconds)

    def stop(self) -> None:
        # Cancel first so a tick suspended on the network cannot land after teardown.
        self.poller.cancel()
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
            log.info("Monitor session stopped.")
