from __future__ import annotations

import logging
from dataclasses import dataclass, field

from stockmonitor.core.errors import DomainFailure
from stockmonitor.models import ExecutionLogEntry, ScheduleDescriptor
from stockmonitor.services.http import JsonService

log = logging.getLogger("services.scheduler_client")


@dataclass(frozen=True)
class ScheduleListing:
    success: bool
    schedules: list[ScheduleDescriptor] = field(default_factory=list)


@dataclass(frozen=True)
class ExecutionPage:
    success: bool
    executions: list[ExecutionLogEntry] = field(default_factory=list)
    total: int = 0


class SchedulerClient(JsonService):
    """
    Client for the remote cron-like scheduler.
    Listing and log queries return `success: false` as data; the background
    flows decide what to do with it. Pause/resume raise DomainFailure instead,
    since only the operator-driven toggle calls them.
    """

    async def list_schedules(self, agent_id: str) -> ScheduleListing:
        data = await self.request("GET", "/api/scheduler/schedules", params={"agentId": agent_id})
        rows = data.get("schedules")
        if not data.get("success") or not isinstance(rows, list):
            return ScheduleListing(success=False)
        return ScheduleListing(
            success=True,
            schedules=[ScheduleDescriptor.from_wire(r) for r in rows if isinstance(r, dict)],
        )

    async def get_logs(self, schedule_id: str, limit: int = 5) -> ExecutionPage:
        data = await self.request("GET", f"/api/scheduler/schedules/{schedule_id}/logs", params={"limit": str(limit)})
        rows = data.get("executions")
        if not data.get("success") or not isinstance(rows, list):
            return ExecutionPage(success=False)

        # total may arrive as a string or be missing entirely.
        try:
            total = int(data.get("total") or 0)
        except (TypeError, ValueError):
            total = len(rows)
        return ExecutionPage(
            success=True,
            executions=[ExecutionLogEntry.from_wire(r) for r in rows if isinstance(r, dict)],
            total=total,
        )

    async def _ack(self, schedule_id: str, action: str) -> dict:
        data = await self.request("POST", f"/api/scheduler/schedules/{schedule_id}/{action}")
        if data.get("success") is False:
            reason = data.get("error")
            raise DomainFailure(reason if isinstance(reason, str) and reason else None)
        log.info("schedule %s: %s acknowledged", schedule_id, action)
        return data

    async def pause(self, schedule_id: str) -> dict:
        return await self._ack(schedule_id, "pause")

    async def resume(self, schedule_id: str) -> dict:
        return await self._ack(schedule_id, "resume")
