from enum import Enum

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy import Enum as SQLAEnum

from app.core.datetime_utils import get_now_utc
from app.models.base import Base, generate_uuid


class OutboxStatusEnum(str, Enum):
    pending = "pending"
    processing = "processing"
    sent = "sent"
    failed = "failed"


class OutboxEvent(Base):
    """Domain event written in the same transaction as the change it describes"""
    __tablename__ = "outbox_events"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    event_type = Column(String(100), nullable=False, index=True)
    payload = Column(JSON, nullable=False, default=dict)
    status = Column(
        SQLAEnum(
            OutboxStatusEnum,
            name="outbox_status_enum",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=OutboxStatusEnum.pending,
        index=True,
    )
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text, nullable=True)
    # set when a worker claims the event; stale claims are taken over
    locked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_now_utc)
    processed_at = Column(DateTime(timezone=True), nullable=True)

    def __str__(self):
        return f"{self.event_type} ({self.status.value if self.status else ''})"
