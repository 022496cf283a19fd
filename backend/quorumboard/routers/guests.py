"""Guest API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from quorumboard.database import get_db
from quorumboard.dependencies import SessionContext, get_session_context
from quorumboard.schemas.candidate import GuestCreate, GuestOut
from quorumboard.services import guest_service

router = APIRouter()


@router.post("/rooms/{room_id}/guests", response_model=GuestOut, status_code=status.HTTP_201_CREATED)
def add_guest(
    room_id: str,
    payload: GuestCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Add a guest; one tied to a candidate counts as a "yes" for it."""
    return guest_service.add_guest(db, ctx, room_id, payload.name, payload.note, payload.candidate_id)


@router.get("/rooms/{room_id}/guests", response_model=list[GuestOut])
def list_guests(
    room_id: str,
    candidate_id: Optional[str] = Query(None),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return guest_service.list_guests(db, ctx, room_id, candidate_id=candidate_id)


@router.delete("/guests/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_guest(
    guest_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    guest_service.delete_guest(db, ctx, guest_id)
