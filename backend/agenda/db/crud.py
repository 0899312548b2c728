import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.errors import EventNotFound, StoreError, ValidationError
from ..core.timeutil import as_utc, utcnow
from ..schemas.events import EventCreate, EventPatch
from ..services.validation import check_ordering
from .models import Event

logger = logging.getLogger(__name__)


@contextmanager
def _store_call(session: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise StoreError(f"Failed to {action}") from e


def _save(session: Session, event: Event) -> Event:
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


def _load(session: Session, event_id: str) -> Event:
    event = session.get(Event, event_id)
    if event is None:
        raise EventNotFound(event_id)
    return event


def create_event(session: Session, data: EventCreate) -> Event:
    with _store_call(session, "create event"):
        event = _save(session, Event(**data.model_dump()))
    logger.info(f"Created event {event.id}")
    return event


def get_event(session: Session, event_id: str) -> Optional[Event]:
    with _store_call(session, "fetch event"):
        return session.get(Event, event_id)


def list_events(
    session: Session,
    range_start: Optional[datetime] = None,
    range_end: Optional[datetime] = None,
) -> List[Event]:
    """Events intersecting the half-open range [range_start, range_end).

    Touching the boundary is not an overlap. Without both bounds every event
    is returned.
    """
    stmt = select(Event)
    if range_start is not None and range_end is not None:
        stmt = stmt.where(Event.start < as_utc(range_end), Event.end > as_utc(range_start))
    stmt = stmt.order_by(Event.start, Event.id)
    with _store_call(session, "fetch events"):
        return list(session.exec(stmt).all())


def replace_event(session: Session, event_id: str, data: EventCreate) -> Event:
    with _store_call(session, "update event"):
        event = _load(session, event_id)
        for field, value in data.model_dump().items():
            setattr(event, field, value)
        event.updated_at = utcnow()
        event = _save(session, event)
    logger.info(f"Replaced event {event_id}")
    return event


def update_event(session: Session, event_id: str, patch: EventPatch) -> Event:
    changes = patch.changes()
    with _store_call(session, "update event"):
        event = _load(session, event_id)
        violations = check_ordering(changes.get("start", event.start), changes.get("end", event.end))
        if violations:
            raise ValidationError(violations)
        for field, value in changes.items():
            setattr(event, field, value)
        event.updated_at = utcnow()
        event = _save(session, event)
    logger.info(f"Updated event {event_id}: {sorted(changes)}")
    return event


def delete_event(session: Session, event_id: str) -> None:
    with _store_call(session, "delete event"):
        event = _load(session, event_id)
        session.delete(event)
        session.commit()
    logger.info(f"Deleted event {event_id}")
