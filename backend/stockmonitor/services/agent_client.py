from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stockmonitor.services.http import JsonService

log = logging.getLogger("services.agent_client")


@dataclass(frozen=True)
class AgentResult:
    success: bool
    response: Any = None
    error: str | None = None


class AgentClient(JsonService):
    """
    Invokes the remote AI agent synchronously.
    The agent does the actual market research; we only ship the instruction
    and hand back whatever it answered.
    """
    async def invoke(self, instruction: str, agent_id: str) -> AgentResult:
        data = await self.request("POST", "/api/agent", json={"message": instruction, "agent_id": agent_id})
        error = data.get("error")
        result = AgentResult(
            success=bool(data.get("success", False)),
            response=data.get("response"),
            error=error if isinstance(error, str) and error else None,
        )
        log.info("agent %s answered success=%s", agent_id, result.success)
        return result
