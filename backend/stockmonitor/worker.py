import asyncio
import logging
from stockmonitor.config import settings
from stockmonitor.log import setup_logging
from stockmonitor.main import build_session

setup_logging(settings.log_level)
log = logging.getLogger("worker")

async def main() -> int:
    # One-shot: read schedule status and the log, then run a single manual analysis.
    session = build_session()
    try:
        state = await session.coordinator.fetch_status()
        await session.coordinator.load_logs()
        log.info("Schedule %s is %s (%s).", settings.schedule_id, state.value, session.coordinator.cron_text)

        result = await session.trigger.run()
        if not result.ok:
            log.error("Manual analysis failed: %s", result.error)
            return 1
        r = result.record
        log.info("%s %s [%s] at %s", r.current_price, r.price_change, r.direction.value, r.timestamp)
        for point in r.bullet_points:
            log.info("  - %s", point)
        return 0
    finally:
        session.stop()

if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
