from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import Update, and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.datetime_utils import get_now_utc
from app.models import Notification, OutboxEvent, OutboxStatusEnum


class NotificationRepository:
    """In-app notifications"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def add(
        self,
        user_id: str,
        title: str,
        message: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Notification:
        """Stage a notification; committed by the caller."""
        notification = Notification(user_id=user_id, title=title, message=message, meta=metadata)
        self.session.add(notification)
        return notification


def claim_statement(event_id: str, claimed_at: datetime, stale_before: Optional[datetime] = None) -> Update:
    """
    Conditional UPDATE moving one event to `processing`.

    Matches pending or failed events, and processing events whose claim is
    older than `stale_before`. A rowcount of 0 means someone else holds it.
    """
    claimable = [OutboxEvent.status.in_([OutboxStatusEnum.pending, OutboxStatusEnum.failed])]
    if stale_before is not None:
        claimable.append(
            and_(OutboxEvent.status == OutboxStatusEnum.processing, OutboxEvent.locked_at <= stale_before)
        )
    return (
        update(OutboxEvent)
        .where(OutboxEvent.id == event_id, or_(*claimable))
        .values(status=OutboxStatusEnum.processing, locked_at=claimed_at)
        .execution_options(synchronize_session=False)
    )


class OutboxRepository:
    """Pending domain events waiting for the notification consumer"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, event_id: str) -> Optional[OutboxEvent]:
        return await self.session.get(OutboxEvent, event_id)

    async def claim(self, event_id: str, stale_before: Optional[datetime] = None) -> bool:
        """Take the event for this worker; False when it is sent or held elsewhere."""
        result = await self.session.execute(claim_statement(event_id, get_now_utc(), stale_before))
        await self.session.commit()
        return result.rowcount == 1

    async def list_retryable(
        self,
        max_attempts: int,
        created_before: Optional[datetime] = None,
        stale_before: Optional[datetime] = None,
        limit: int = 50,
    ) -> List[str]:
        """IDs of pending/failed (or abandoned) events under the attempt limit, oldest first."""
        conditions = []
        if created_before is not None:
            conditions.append(OutboxEvent.created_at <= created_before)
        statuses = [
            OutboxEvent.status == OutboxStatusEnum.pending,
            OutboxEvent.status == OutboxStatusEnum.failed,
        ]
        if stale_before is not None:
            statuses.append(
                and_(OutboxEvent.status == OutboxStatusEnum.processing, OutboxEvent.locked_at <= stale_before)
            )
        result = await self.session.execute(
            select(OutboxEvent.id)
            .where(
                *conditions,
                or_(*statuses),
                OutboxEvent.attempts < max_attempts,
            )
            .order_by(OutboxEvent.created_at)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def mark_sent(self, event: OutboxEvent) -> None:
        event.status = OutboxStatusEnum.sent
        event.attempts = (event.attempts or 0) + 1
        event.last_error = None
        event.processed_at = get_now_utc()
        event.locked_at = None
        await self.session.commit()

    async def mark_failed(self, event: OutboxEvent, error: str) -> None:
        event.status = OutboxStatusEnum.failed
        event.attempts = (event.attempts or 0) + 1
        event.last_error = error[:2000]
        event.processed_at = get_now_utc()
        event.locked_at = None
        await self.session.commit()
