from app.core.db import AsyncSessionFactory
from app.core.logger import logger
from app.domains.notifications.dispatcher import OutboxDispatcher


async def relay_outbox_events():
    """Periodic job: deliver outbox events whose first dispatch failed or never ran"""
    delivered = await OutboxDispatcher(AsyncSessionFactory).relay_pending()
    if delivered:
        logger.info(f"Outbox relay delivered {delivered} event(s)")
