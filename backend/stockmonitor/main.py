from __future__ import annotations
import logging
from fastapi import FastAPI
from stockmonitor.config import settings
from stockmonitor.log import setup_logging
from stockmonitor.core.session import MonitorSession
from stockmonitor.services.agent_client import AgentClient
from stockmonitor.services.scheduler_client import SchedulerClient

from stockmonitor.routers.health import router as health_router
from stockmonitor.routers.feed import router as feed_router
from stockmonitor.routers.analysis import router as analysis_router
from stockmonitor.routers.schedule import router as schedule_router
from stockmonitor.routers.admin import router as admin_router

setup_logging(settings.log_level)
log = logging.getLogger("stockmonitor.main")

app = FastAPI(title="Stock Monitor", version="0.1.0")

app.include_router(health_router)
app.include_router(feed_router)
app.include_router(analysis_router)
app.include_router(schedule_router)
app.include_router(admin_router)

def build_session() -> MonitorSession:
    agent = AgentClient(settings.agent_api_url, timeout=settings.request_timeout_seconds)
    scheduler = SchedulerClient(settings.scheduler_api_url, timeout=settings.request_timeout_seconds)
    return MonitorSession(settings, agent, scheduler)

@app.on_event("startup")
async def startup():
    # Now, we create the monitoring session for this process.
    # It loads schedule status and the execution log, then starts the poll job.
    session = build_session()
    await session.start()
    app.state.session = session
    log.info("Monitoring agent %s / schedule %s.", settings.agent_id, settings.schedule_id)

@app.on_event("shutdown")
async def shutdown():
    # Now, we tear the session down. No poll tick runs after this point.
    session = getattr(app.state, "session", None)
    if session is not None:
        session.stop()
        app.state.session = None
