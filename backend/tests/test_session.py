from __future__ import annotations

import asyncio
from dataclasses import replace

from fakes import FakeAgentClient, FakeSchedulerClient, analysis_json, execution, page
from stockmonitor.core.poller import TickOutcome
from stockmonitor.core.session import POLL_JOB_ID, MonitorSession
from stockmonitor.models import ScheduleState, Source


def test_start_loads_status_and_logs_then_schedules_poll(test_settings):
    scheduler = FakeSchedulerClient()
    scheduler.pages = [page(execution("e1"), total=9)]
    session = MonitorSession(test_settings, FakeAgentClient(), scheduler)

    async def scenario():
        await session.start()
        job = session.scheduler.get_job(POLL_JOB_ID)
        interval = job.trigger.interval.total_seconds()
        max_instances = job.max_instances
        session.stop()
        return interval, max_instances

    interval, max_instances = asyncio.run(scenario())

    assert interval == 60
    assert max_instances == 1
    assert session.coordinator.state is ScheduleState.ACTIVE
    assert session.coordinator.executions_total == 9
    assert ("logs", "sched-1", 5) in scheduler.calls


def test_stop_cancels_poller(test_settings):
    session = MonitorSession(test_settings, FakeAgentClient(), FakeSchedulerClient())

    async def scenario():
        await session.start()
        session.stop()
        return await session.poller.tick()

    assert asyncio.run(scenario()) is TickOutcome.SKIPPED
    assert session.running is False


def test_sample_mode_follows_settings(test_settings):
    session = MonitorSession(replace(test_settings, sample_mode=True), FakeAgentClient(), FakeSchedulerClient())

    assert session.feed.sample_mode is True
    assert len(session.feed.display_records()) == 3


def test_manual_and_scheduled_flows_share_one_feed(test_settings):
    scheduler = FakeSchedulerClient()
    scheduler.pages = [
        page(execution("e1")),
        page(execution("e2", output=analysis_json("$430.00", "2026-10-18T14:10:00Z"))),
    ]
    session = MonitorSession(test_settings, FakeAgentClient(), scheduler)

    async def scenario():
        await session.poller.tick()
        await session.trigger.run()
        await session.poller.tick()

    asyncio.run(scenario())

    records = session.feed.current_records()
    assert [r.source for r in records] == [Source.SCHEDULED, Source.MANUAL]
    assert records[0].current_price == "$430.00"
