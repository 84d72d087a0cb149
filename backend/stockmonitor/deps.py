from __future__ import annotations

from fastapi import HTTPException, Request

from stockmonitor.core.session import MonitorSession


def get_session(request: Request) -> MonitorSession:
    # The session is created on startup and lives on app.state for the app's lifetime.
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Monitor session is not running.")
    return session
