from __future__ import annotations

import asyncio

from fakes import analysis_json, execution, page
from stockmonitor.core.errors import TransportFailure
from stockmonitor.core.poller import TickOutcome
from stockmonitor.models import Source
from stockmonitor.services.scheduler_client import ExecutionPage


def tick(poller):
    return asyncio.run(poller.tick())


def test_first_tick_only_records_latest_id(poller, scheduler_client, feed):
    scheduler_client.pages = [page(execution("e2", output=analysis_json()), execution("e1", output=analysis_json("$1")))]

    assert tick(poller) is TickOutcome.PRIMED
    assert poller.last_seen_execution_id == "e2"
    assert len(feed) == 0


def test_new_execution_is_inserted_as_scheduled(poller, scheduler_client, feed, coordinator):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [page(execution("e2", output=analysis_json()), execution("e1"), total=12)]

    assert tick(poller) is TickOutcome.ADVANCED

    records = feed.current_records()
    assert len(records) == 1
    assert records[0].source is Source.SCHEDULED
    assert records[0].current_price == "$420.00"
    assert poller.last_seen_execution_id == "e2"
    assert [e.id for e in coordinator.recent_executions] == ["e2", "e1"]
    assert coordinator.executions_total == 12


def test_requests_a_small_page(poller, scheduler_client):
    tick(poller)

    assert scheduler_client.calls == [("logs", "sched-1", 3)]


def test_already_seen_execution_is_ignored(poller, scheduler_client, feed):
    poller.last_seen_execution_id = "e2"
    scheduler_client.pages = [page(execution("e2", output=analysis_json()))]

    assert tick(poller) is TickOutcome.UNCHANGED
    assert len(feed) == 0


def test_empty_page_is_a_noop(poller, scheduler_client):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [page()]

    assert tick(poller) is TickOutcome.EMPTY
    assert poller.last_seen_execution_id == "e1"


def test_failed_execution_advances_without_insert(poller, scheduler_client, feed, coordinator):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [page(execution("e2", success=False, output=analysis_json()))]

    assert tick(poller) is TickOutcome.ADVANCED
    assert poller.last_seen_execution_id == "e2"
    assert len(feed) == 0
    # The log view is refreshed even though nothing was inserted.
    assert [e.id for e in coordinator.recent_executions] == ["e2"]


def test_empty_object_output_inserts_defaults_record(poller, scheduler_client, feed):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [page(execution("e2", output={}))]

    assert tick(poller) is TickOutcome.ADVANCED
    assert len(feed) == 1
    assert feed.current_records()[0].current_price == "N/A"


def test_empty_string_output_inserts_nothing(poller, scheduler_client, feed):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [page(execution("e2", output=""))]

    assert tick(poller) is TickOutcome.ADVANCED
    assert len(feed) == 0


def test_unparseable_output_advances_without_insert(poller, scheduler_client, feed):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [page(execution("e2", output="{garbled"))]

    assert tick(poller) is TickOutcome.ADVANCED
    assert poller.last_seen_execution_id == "e2"
    assert len(feed) == 0


def test_fetch_failure_leaves_state_untouched(poller, scheduler_client, feed):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [TransportFailure("boom"), page(execution("e2", output=analysis_json()))]

    assert tick(poller) is TickOutcome.FAILED
    assert poller.last_seen_execution_id == "e1"
    assert poller.busy is False

    # The next tick retries and picks the execution up.
    assert tick(poller) is TickOutcome.ADVANCED
    assert len(feed) == 1


def test_domain_failure_is_swallowed(poller, scheduler_client):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [ExecutionPage(success=False)]

    assert tick(poller) is TickOutcome.FAILED
    assert poller.last_seen_execution_id == "e1"


def test_duplicate_content_is_not_inserted_twice(poller, scheduler_client, feed):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [
        page(execution("e2", output=analysis_json())),
        page(execution("e3", output=analysis_json())),
    ]

    tick(poller)
    tick(poller)

    assert poller.last_seen_execution_id == "e3"
    assert len(feed) == 1


def test_scheduled_insert_while_scrolled_flags_unseen(poller, scheduler_client, engagement):
    poller.last_seen_execution_id = "e1"
    engagement.update_viewport(800)
    scheduler_client.pages = [page(execution("e2", output=analysis_json()))]

    tick(poller)

    assert engagement.unseen_update is True


def test_scheduled_insert_at_top_does_not_flag(poller, scheduler_client, engagement):
    poller.last_seen_execution_id = "e1"
    scheduler_client.pages = [page(execution("e2", output=analysis_json()))]

    tick(poller)

    assert engagement.unseen_update is False


def test_overlapping_tick_is_skipped(poller, scheduler_client):
    gate = asyncio.Event()

    async def slow_logs(schedule_id, limit=5):
        await gate.wait()
        return page(execution("e9"))

    scheduler_client.get_logs = slow_logs

    async def scenario():
        first = asyncio.create_task(poller.tick())
        await asyncio.sleep(0)
        second = await poller.tick()
        gate.set()
        return second, await first

    second, first = asyncio.run(scenario())

    assert second is TickOutcome.SKIPPED
    assert first is TickOutcome.PRIMED


def test_cancelled_poller_never_ticks(poller, scheduler_client):
    poller.cancel()

    assert tick(poller) is TickOutcome.SKIPPED
    assert scheduler_client.calls == []


def test_cancel_during_fetch_abandons_tick(poller, scheduler_client, feed):
    poller.last_seen_execution_id = "e1"

    async def logs_then_cancel(schedule_id, limit=5):
        poller.cancel()
        return page(execution("e2", output=analysis_json()))

    scheduler_client.get_logs = logs_then_cancel

    assert tick(poller) is TickOutcome.SKIPPED
    assert poller.last_seen_execution_id == "e1"
    assert len(feed) == 0
