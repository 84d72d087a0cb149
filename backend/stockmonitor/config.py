from __future__ import annotations
from dataclasses import dataclass
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Now, we define the Settings class.
# We use @dataclass(frozen=True) to make this immutable.
# Once settings are loaded, they should not change during runtime.
@dataclass(frozen=True)
class Settings:
    # Now, we fetch the identifiers of the one agent and one schedule we monitor.
    agent_id: str = os.getenv("AGENT_ID", "699c608cb6c78525434dfd6c")
    schedule_id: str = os.getenv("SCHEDULE_ID", "699c6093399dfadeac38a2e8")

    # Base URLs of the remote agent and scheduler backends.
    agent_api_url: str = os.getenv("AGENT_API_URL", "http://localhost:3000").rstrip("/")
    scheduler_api_url: str = os.getenv("SCHEDULER_API_URL", "http://localhost:3000").rstrip("/")
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

    # Poller config
    poll_interval_seconds: int = int(os.getenv("POLL_INTERVAL_SECONDS", "60"))
    poll_page_limit: int = int(os.getenv("POLL_PAGE_LIMIT", "3"))
    log_page_limit: int = int(os.getenv("LOG_PAGE_LIMIT", "5"))

    analysis_instruction: str = os.getenv(
        "ANALYSIS_INSTRUCTION",
        "Analyze the current MSFT stock price, direction, and key trends. "
        "Return current_price, price_change, direction, bullet_points, and timestamp.",
    )

    # Feed view config
    sample_mode: bool = _flag("SAMPLE_MODE", "false")
    scroll_threshold_px: int = int(os.getenv("SCROLL_THRESHOLD_PX", "100"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
