from __future__ import annotations

from fastapi import APIRouter, Depends

from stockmonitor.core.display import relative_time
from stockmonitor.core.session import MonitorSession
from stockmonitor.deps import get_session
from stockmonitor.models import now_utc
from stockmonitor.schemas import AcknowledgeOut, AnalysisOut, FeedOut, SampleModeIn, ViewportIn

router = APIRouter(prefix="/api/v1/feed", tags=["feed"])

@router.get("", response_model=FeedOut)
def get_feed(session: MonitorSession = Depends(get_session)):
    now = now_utc()
    feed = session.feed
    records = feed.display_records(now)
    latest = feed.latest(now)
    last_updated = feed.last_updated
    return FeedOut(
        records=[AnalysisOut.from_record(r, now) for r in records],
        latest=AnalysisOut.from_record(latest, now) if latest else None,
        sample=len(feed) == 0 and bool(records),
        sample_mode=feed.sample_mode,
        unseen_update=session.engagement.unseen_update,
        scroll_to_top=session.engagement.consume_scroll_request(),
        last_updated=last_updated,
        last_updated_relative=relative_time(last_updated.isoformat(), now) if last_updated else "",
    )

@router.post("/viewport")
def update_viewport(body: ViewportIn, session: MonitorSession = Depends(get_session)):
    session.engagement.update_viewport(body.scroll_offset)
    return {"ok": True, "at_top": session.engagement.at_top}

@router.post("/acknowledge", response_model=AcknowledgeOut)
def acknowledge(session: MonitorSession = Depends(get_session)):
    return AcknowledgeOut(scroll_to_top=session.engagement.acknowledge())

@router.post("/sample-mode")
def set_sample_mode(body: SampleModeIn, session: MonitorSession = Depends(get_session)):
    session.feed.sample_mode = body.enabled
    return {"ok": True, "sample_mode": session.feed.sample_mode}
