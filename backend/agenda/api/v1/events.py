from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlmodel import Session

from ...core.errors import EventNotFound, ValidationError, Violation
from ...db import crud
from ...db.session import get_session
from ...schemas.events import EventOut
from ...services.validation import validate_create, validate_patch, validate_range

router = APIRouter()


@router.post("/events", response_model=EventOut, status_code=201)
def create(payload: Any = Body(None), session: Session = Depends(get_session)):
    return crud.create_event(session, validate_create(payload))


@router.get("/events", response_model=List[EventOut])
def list_all(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    session: Session = Depends(get_session),
):
    start, end = validate_range(start, end)
    return crud.list_events(session, start, end)


@router.get("/events/{event_id}", response_model=EventOut)
def get_one(event_id: str, session: Session = Depends(get_session)):
    event = crud.get_event(session, event_id)
    if event is None:
        raise EventNotFound(event_id)
    return event


@router.put("/events/{event_id}", response_model=EventOut)
def replace(event_id: str, payload: Any = Body(None), session: Session = Depends(get_session)):
    return crud.replace_event(session, event_id, validate_create(payload))


@router.patch("/events/{event_id}", response_model=EventOut)
def update(event_id: str, payload: Any = Body(None), session: Session = Depends(get_session)):
    return crud.update_event(session, event_id, validate_patch(payload))


@router.delete("/events/{event_id}", status_code=204, response_class=Response)
def delete(event_id: str, session: Session = Depends(get_session)):
    crud.delete_event(session, event_id)
    return Response(status_code=204)


# Collection-level variants taking the id as a query parameter, kept for
# older calendar clients.

def _require_id(event_id: Optional[str]) -> str:
    if not event_id:
        raise ValidationError([Violation("id", "Missing id")])
    return event_id


@router.patch("/events", response_model=EventOut)
def update_by_query(
    event_id: Optional[str] = Query(None, alias="id"),
    payload: Any = Body(None),
    session: Session = Depends(get_session),
):
    violations = [] if event_id else [Violation("id", "Missing id")]
    try:
        patch = validate_patch(payload)
    except ValidationError as exc:
        raise ValidationError(violations + exc.violations) from None
    return crud.update_event(session, _require_id(event_id), patch)


@router.delete("/events")
def delete_by_query(event_id: Optional[str] = Query(None, alias="id"), session: Session = Depends(get_session)):
    crud.delete_event(session, _require_id(event_id))
    return {"ok": True}
