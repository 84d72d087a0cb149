"""
Schedule State Coordinator.

Keeps a local projection of the remote schedule: {unknown, active, paused}.

Pattern: Reconcile, never assume.
A toggle issues pause/resume and then re-reads the schedule listing. The
cached state only ever changes to what the backend reports.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from stockmonitor.core.display import cron_to_human
from stockmonitor.core.errors import DomainFailure, MonitorError, TransportFailure
from stockmonitor.models import ExecutionLogEntry, ScheduleDescriptor, ScheduleState

log = logging.getLogger("core.schedule")

DEFAULT_CRON_TEXT = "Every 10 minutes"


@dataclass(frozen=True)
class ToggleResult:
    accepted: bool
    state: ScheduleState
    error: str | None = None


def describe_failure(exc: Exception, action: str) -> str:
    """Turn a failure into the one line the operator gets to see."""
    if isinstance(exc, DomainFailure) and exc.reason:
        return exc.reason
    if isinstance(exc, DomainFailure):
        return f"Could not {action} the scheduler. Please try again."
    if isinstance(exc, TransportFailure):
        return f"Network error while trying to {action} the scheduler."
    return f"Unexpected error while trying to {action} the scheduler."


class ScheduleCoordinator:
    def __init__(self, client, agent_id: str, schedule_id: str, log_page_limit: int = 5):
        self.client = client
        self.agent_id = agent_id
        self.schedule_id = schedule_id
        self.log_page_limit = log_page_limit

        self.descriptor: ScheduleDescriptor | None = None
        self.toggling = False
        self.last_error: str | None = None

        # Cached execution log view, refreshed at start and by the poller.
        self.recent_executions: list[ExecutionLogEntry] = []
        self.executions_total = 0

    @property
    def state(self) -> ScheduleState:
        if self.descriptor is None:
            return ScheduleState.UNKNOWN
        return self.descriptor.state

    @property
    def cron_text(self) -> str:
        if self.descriptor is None or not self.descriptor.cron_expression:
            return DEFAULT_CRON_TEXT
        return cron_to_human(self.descriptor.cron_expression)

    async def _refresh(self) -> ScheduleState:
        listing = await self.client.list_schedules(self.agent_id)
        if not listing.success:
            log.warning("schedule listing for %s reported success: false", self.agent_id)
            raise DomainFailure()

        # Now, we pick our schedule, tolerating the listing changing shape under us.
        chosen = next((s for s in listing.schedules if s.id == self.schedule_id), None)
        if chosen is None and listing.schedules:
            chosen = listing.schedules[0]
            log.warning("schedule %s not listed; tracking %s instead", self.schedule_id, chosen.id)
        if chosen is not None:
            self.descriptor = chosen
        return self.state

    async def fetch_status(self) -> ScheduleState:
        """
        Re-read the schedule from the backend.
        On any failure the last known state is kept (including UNKNOWN).
        """
        try:
            return await self._refresh()
        except MonitorError as e:
            log.warning("schedule status refresh failed: %s", e)
        except Exception:
            log.exception("unexpected error refreshing schedule status")
        return self.state

    async def toggle(self) -> ToggleResult:
        if self.toggling:
            return ToggleResult(accepted=False, state=self.state, error="A scheduler change is already in progress.")
        if self.descriptor is None:
            return ToggleResult(accepted=False, state=self.state, error="Scheduler status is not known yet.")

        self.toggling = True
        self.last_error = None
        target = self.descriptor
        action = "pause" if target.is_active else "resume"
        try:
            try:
                if target.is_active:
                    await self.client.pause(target.id)
                else:
                    await self.client.resume(target.id)
            except Exception as e:
                log.warning("schedule %s %s failed: %s", target.id, action, e)
                self.last_error = describe_failure(e, action)

            # Always reconcile with the source of truth, whatever happened above.
            try:
                await self._refresh()
            except Exception as e:
                log.warning("schedule status reconcile after %s failed: %s", action, e)
                self.last_error = self.last_error or describe_failure(e, action)
        finally:
            self.toggling = False

        log.info("schedule toggle (%s) settled at %s", action, self.state.value)
        return ToggleResult(accepted=True, state=self.state, error=self.last_error)

    def record_executions(self, executions: list[ExecutionLogEntry], total: int) -> None:
        self.recent_executions = list(executions)
        self.executions_total = total

    async def load_logs(self) -> bool:
        try:
            page = await self.client.get_logs(self.schedule_id, limit=self.log_page_limit)
        except MonitorError as e:
            log.warning("execution log load failed: %s", e)
            return False
        if not page.success:
            return False
        self.record_executions(page.executions, page.total)
        return True
