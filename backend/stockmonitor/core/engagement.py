from __future__ import annotations

import logging

from stockmonitor.models import Source

log = logging.getLogger("core.engagement")


class EngagementTracker:
    """
    Decides whether a fresh scheduled analysis should be flagged as "unseen".

    The view reports its scroll offset; an insertion made while the operator is
    scrolled away from the top raises a sticky flag that only an explicit
    acknowledgment clears.
    """
    def __init__(self, scroll_threshold_px: int = 100):
        self.scroll_threshold_px = scroll_threshold_px
        self.scroll_offset = 0
        self.unseen_update = False
        self.scroll_to_top_requested = False

    @property
    def at_top(self) -> bool:
        return self.scroll_offset <= self.scroll_threshold_px

    def update_viewport(self, scroll_offset: int) -> None:
        self.scroll_offset = max(int(scroll_offset), 0)

    def record_insertion(self, source: Source, at_top_of_viewport: bool) -> bool:
        # Manual runs: the operator who clicked is already looking at the top.
        if source is Source.SCHEDULED and not at_top_of_viewport:
            if not self.unseen_update:
                log.info("scheduled analysis arrived while scrolled away; flagging unseen update")
            self.unseen_update = True
        return self.unseen_update

    def acknowledge(self) -> bool:
        """Clear the flag and ask the view to scroll back to the top."""
        self.unseen_update = False
        self.scroll_to_top_requested = True
        self.scroll_offset = 0
        return True

    def consume_scroll_request(self) -> bool:
        requested = self.scroll_to_top_requested
        self.scroll_to_top_requested = False
        return requested
