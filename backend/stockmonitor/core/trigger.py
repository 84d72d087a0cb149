from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from stockmonitor.core.engagement import EngagementTracker
from stockmonitor.core.errors import TransportFailure
from stockmonitor.core.feed import FeedStore
from stockmonitor.core.normalize import build_record, normalize
from stockmonitor.models import AnalysisRecord, Source

log = logging.getLogger("core.trigger")

MSG_IN_PROGRESS = "An analysis is already running."
MSG_FAILED = "Analysis failed. Please try again."
MSG_BAD_FORMAT = "Received unexpected response format from agent."
MSG_NETWORK = "Network error during analysis."


@dataclass(frozen=True)
class TriggerResult:
    record: AnalysisRecord | None = None
    error: str | None = None
    duplicate: bool = False

    @property
    def ok(self) -> bool:
        return self.record is not None


class ManualTrigger:
    """
    Operator-initiated, one-shot analysis.
    Calls the agent directly and inserts the answer as a manual record. This
    path does not go through the execution log, so the poller's last seen id
    is never consulted or touched.
    """
    def __init__(self, client, agent_id: str, instruction: str, feed: FeedStore, engagement: EngagementTracker):
        self.client = client
        self.agent_id = agent_id
        self.instruction = instruction
        self.feed = feed
        self.engagement = engagement
        self.running = False

    async def run(self) -> TriggerResult:
        if self.running:
            return TriggerResult(error=MSG_IN_PROGRESS)

        self.running = True
        try:
            result = await self.client.invoke(self.instruction, self.agent_id)
        except TransportFailure as e:
            log.warning("manual analysis request failed: %s", e)
            return TriggerResult(error=MSG_NETWORK)
        except Exception:
            log.exception("manual analysis request failed unexpectedly")
            return TriggerResult(error=MSG_NETWORK)
        finally:
            self.running = False

        if not result.success:
            log.warning("agent reported failure: %s", result.error)
            return TriggerResult(error=result.error or MSG_FAILED)

        response = result.response
        payload = response.get("result", response) if isinstance(response, Mapping) else response
        fragment = normalize(payload)
        if fragment is None:
            log.warning("agent returned an unparseable payload")
            return TriggerResult(error=MSG_BAD_FORMAT)

        record = build_record(fragment, Source.MANUAL)
        inserted = self.feed.insert(record)
        if inserted:
            self.engagement.record_insertion(Source.MANUAL, at_top_of_viewport=True)
        return TriggerResult(record=record, duplicate=not inserted)
