from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from stockmonitor.core.session import MonitorSession
from stockmonitor.core.trigger import MSG_IN_PROGRESS
from stockmonitor.deps import get_session
from stockmonitor.schemas import AnalysisOut, RunAnalysisOut

router = APIRouter(prefix="/api/v1/analysis", tags=["analysis"])

@router.post("/run", response_model=RunAnalysisOut)
async def run_analysis(session: MonitorSession = Depends(get_session)):
    result = await session.trigger.run()
    if result.error == MSG_IN_PROGRESS:
        raise HTTPException(status_code=409, detail=result.error)
    if not result.ok:
        # Now, we surface the single operator-facing message as the error detail.
        raise HTTPException(status_code=502, detail=result.error)
    return RunAnalysisOut(record=AnalysisOut.from_record(result.record), duplicate=result.duplicate)
