from __future__ import annotations

from fastapi import APIRouter, Depends

from stockmonitor.core.session import MonitorSession
from stockmonitor.deps import get_session
from stockmonitor.schemas import PollOut

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

@router.post("/poll", response_model=PollOut)
async def poll_now(session: MonitorSession = Depends(get_session)):
    outcome = await session.poller.tick()
    return PollOut(outcome=outcome.value, last_seen_execution_id=session.poller.last_seen_execution_id)
