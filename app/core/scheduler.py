from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import OUTBOX_RELAY_INTERVAL_SECONDS
from app.tasks.outbox_relay import relay_outbox_events


def build_scheduler() -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        relay_outbox_events,
        trigger=IntervalTrigger(seconds=OUTBOX_RELAY_INTERVAL_SECONDS),
        id="relay_outbox_events_job",
        replace_existing=True,
        max_instances=1,  # a slow SMTP round must not overlap the next one
        coalesce=True,
    )
    return scheduler


def start_scheduler() -> AsyncIOScheduler:
    scheduler = build_scheduler()
    scheduler.start()
    return scheduler
