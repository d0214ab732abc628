import asyncio

from app.core.config import OUTBOX_RELAY_INTERVAL_SECONDS
from app.core.logger import logger
from app.core.scheduler import build_scheduler


async def main():
    """Run the outbox relay on its own, without the API process."""
    scheduler = build_scheduler()
    logger.info(f"Outbox relay scheduled every {OUTBOX_RELAY_INTERVAL_SECONDS}s")

    scheduler.start()
    logger.info("Scheduler started. Running until interrupted...")

    try:
        # keep the loop alive; the scheduler does the work
        while True:
            await asyncio.sleep(3600)
    except (KeyboardInterrupt, SystemExit, asyncio.CancelledError):
        logger.info("Scheduler stopped.")
        scheduler.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
