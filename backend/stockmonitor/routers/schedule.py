from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from stockmonitor.core.schedule import ScheduleCoordinator
from stockmonitor.core.session import MonitorSession
from stockmonitor.deps import get_session
from stockmonitor.schemas import ExecutionLogOut, ExecutionOut, ScheduleOut, ScheduleStatusOut

router = APIRouter(prefix="/api/v1/schedule", tags=["schedule"])

def _status(c: ScheduleCoordinator, error: str | None = None) -> ScheduleStatusOut:
    return ScheduleStatusOut(
        state=c.state.value,
        schedule=ScheduleOut.from_descriptor(c.descriptor) if c.descriptor else None,
        cron_text=c.cron_text,
        toggling=c.toggling,
        error=error,
    )

@router.get("", response_model=ScheduleStatusOut)
def get_schedule(session: MonitorSession = Depends(get_session)):
    return _status(session.coordinator)

@router.post("/refresh", response_model=ScheduleStatusOut)
async def refresh_schedule(session: MonitorSession = Depends(get_session)):
    await session.coordinator.fetch_status()
    return _status(session.coordinator)

@router.post("/toggle", response_model=ScheduleStatusOut)
async def toggle_schedule(session: MonitorSession = Depends(get_session)):
    result = await session.coordinator.toggle()
    if not result.accepted:
        raise HTTPException(status_code=409, detail=result.error)
    return _status(session.coordinator, error=result.error)

@router.get("/logs", response_model=ExecutionLogOut)
def get_logs(session: MonitorSession = Depends(get_session)):
    c = session.coordinator
    return ExecutionLogOut(
        executions=[ExecutionOut.from_entry(e) for e in c.recent_executions],
        total=c.executions_total,
    )
