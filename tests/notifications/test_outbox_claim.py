from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.domains.notifications.repository import claim_statement
from app.models import Base, OutboxEvent, OutboxStatusEnum

CLAIMED_AT = datetime(2026, 10, 19, 10, 0, 0)


@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


def add_event(session, **overrides):
    values = dict(event_type="application.status_changed", payload={}, status=OutboxStatusEnum.pending)
    values.update(overrides)
    event = OutboxEvent(**values)
    session.add(event)
    session.commit()
    return event


def claim(session, event_id, stale_before=None):
    result = session.execute(claim_statement(event_id, CLAIMED_AT, stale_before))
    session.commit()
    return result.rowcount


@pytest.mark.parametrize("status", [OutboxStatusEnum.pending, OutboxStatusEnum.failed])
def test_only_one_claim_wins(session, status):
    event = add_event(session, status=status)

    assert claim(session, event.id) == 1
    assert claim(session, event.id) == 0

    session.refresh(event)
    assert event.status == OutboxStatusEnum.processing
    assert event.locked_at == CLAIMED_AT


def test_sent_event_cannot_be_claimed(session):
    event = add_event(session, status=OutboxStatusEnum.sent)

    assert claim(session, event.id, stale_before=CLAIMED_AT) == 0


def test_abandoned_claim_is_taken_over(session):
    event = add_event(session, status=OutboxStatusEnum.processing, locked_at=CLAIMED_AT - timedelta(minutes=10))

    # still fresh relative to the cutoff
    assert claim(session, event.id, stale_before=CLAIMED_AT - timedelta(minutes=15)) == 0
    assert claim(session, event.id, stale_before=CLAIMED_AT - timedelta(minutes=5)) == 1
