"""Event API routes — delegates to event_service for authorization and quorum rules."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quorumboard.database import get_db
from quorumboard.dependencies import SessionContext, get_session_context
from quorumboard.schemas.event import EventOut, EventDetailOut, EventUpdate
from quorumboard.services import event_service

router = APIRouter()


@router.get("/rooms/{room_id}/events", response_model=list[EventOut])
def list_events(room_id: str, ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """Confirmed events of a room, by date."""
    return event_service.list_events(db, ctx, room_id)


@router.get("/events/{event_id}", response_model=EventDetailOut)
def get_event(event_id: str, ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """Event with participants re-derived from current answers and the share text."""
    return event_service.event_detail(db, ctx, event_id)


@router.patch("/events/{event_id}", response_model=EventDetailOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Set the start time (HH:MM, local) and/or note."""
    event_service.update_event(db, ctx, event_id, payload)
    return event_service.event_detail(db, ctx, event_id)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """Un-confirm: delete the event and reopen its candidate (owner only)."""
    event_service.unconfirm_event(db, ctx, event_id)
