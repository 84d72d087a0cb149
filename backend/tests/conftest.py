from __future__ import annotations

import pytest

from fakes import AGENT_ID, SCHEDULE_ID, FakeAgentClient, FakeSchedulerClient
from stockmonitor.config import Settings
from stockmonitor.core.engagement import EngagementTracker
from stockmonitor.core.feed import FeedStore
from stockmonitor.core.poller import ExecutionPoller
from stockmonitor.core.schedule import ScheduleCoordinator


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        agent_id=AGENT_ID,
        schedule_id=SCHEDULE_ID,
        agent_api_url="http://agent.test",
        scheduler_api_url="http://scheduler.test",
        poll_interval_seconds=60,
        poll_page_limit=3,
        log_page_limit=5,
        sample_mode=False,
        scroll_threshold_px=100,
    )


@pytest.fixture
def scheduler_client() -> FakeSchedulerClient:
    return FakeSchedulerClient()


@pytest.fixture
def agent_client() -> FakeAgentClient:
    return FakeAgentClient()


@pytest.fixture
def feed() -> FeedStore:
    return FeedStore()


@pytest.fixture
def engagement() -> EngagementTracker:
    return EngagementTracker(scroll_threshold_px=100)


@pytest.fixture
def coordinator(scheduler_client) -> ScheduleCoordinator:
    return ScheduleCoordinator(scheduler_client, agent_id=AGENT_ID, schedule_id=SCHEDULE_ID)


@pytest.fixture
def poller(scheduler_client, feed, coordinator, engagement) -> ExecutionPoller:
    return ExecutionPoller(scheduler_client, SCHEDULE_ID, feed, coordinator, engagement, page_limit=3)
