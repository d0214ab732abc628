from datetime import datetime, timedelta
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import OUTBOX_CLAIM_TIMEOUT_SECONDS, OUTBOX_MAX_ATTEMPTS, OUTBOX_RELAY_INTERVAL_SECONDS
from app.core.datetime_utils import get_now_utc
from app.core.db import AsyncSessionFactory
from app.core.logger import logger
from app.domains.notifications.repository import OutboxRepository
from app.domains.notifications.service import EVENT_HANDLERS
from app.models import OutboxStatusEnum


def _stale_claim_cutoff() -> datetime:
    return get_now_utc() - timedelta(seconds=OUTBOX_CLAIM_TIMEOUT_SECONDS)


class OutboxDispatcher:
    """Delivers committed outbox events to their notification handlers"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def dispatch(self, event_id: str) -> bool:
        """
        Run the handler for one event in its own session.

        Returns True when the event ended up sent. Failures are recorded on
        the event and never raised, since this runs after the response.
        """
        try:
            async with self.session_factory() as session:
                return await self._dispatch(session, event_id)
        except Exception:
            logger.exception(f"Outbox event {event_id} could not be processed")
            return False

    async def _dispatch(self, session: AsyncSession, event_id: str) -> bool:
        outbox = OutboxRepository(session)
        if not await outbox.claim(event_id, stale_before=_stale_claim_cutoff()):
            event = await outbox.get(event_id)
            if event is None:
                logger.warning(f"Outbox event {event_id} not found")
                return False
            if event.status == OutboxStatusEnum.sent:
                return True
            logger.info(f"Outbox event {event_id} is already being processed, skipping")
            return False

        event = await outbox.get(event_id)
        handler = EVENT_HANDLERS.get(event.event_type)
        if handler is None:
            await outbox.mark_failed(event, f"No handler for event type '{event.event_type}'")
            logger.error(f"Outbox event {event_id}: no handler for {event.event_type}")
            return False

        try:
            await handler(session, dict(event.payload or {}))
        except Exception as e:
            logger.warning(f"Outbox event {event_id} ({event.event_type}) failed: {e}")
            # drop anything the handler staged, then record the attempt
            await session.rollback()
            event = await outbox.get(event_id)
            await outbox.mark_failed(event, repr(e))
            return False

        # commits the handler's notifications together with the sent flag
        await outbox.mark_sent(event)
        logger.info(f"Outbox event {event_id} ({event.event_type}) delivered")
        return True

    async def relay_pending(self, max_attempts: int = OUTBOX_MAX_ATTEMPTS) -> int:
        """Retry undelivered events; returns how many were delivered"""
        # events younger than one interval still belong to their request's dispatch
        cutoff = get_now_utc() - timedelta(seconds=OUTBOX_RELAY_INTERVAL_SECONDS)
        async with self.session_factory() as session:
            event_ids: List[str] = await OutboxRepository(session).list_retryable(
                max_attempts, created_before=cutoff, stale_before=_stale_claim_cutoff()
            )

        if not event_ids:
            return 0

        logger.info(f"Relaying {len(event_ids)} outbox event(s)")
        delivered = 0
        for event_id in event_ids:
            if await self.dispatch(event_id):
                delivered += 1
        return delivered


def get_event_dispatcher() -> OutboxDispatcher:
    """Dependency; tests override it with a recording fake"""
    return OutboxDispatcher(AsyncSessionFactory)
