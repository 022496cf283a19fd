"""Guest service — non-member attendees counted as automatic "yes"."""
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from quorumboard.dependencies import SessionContext, get_membership, has_role
from quorumboard.models.candidate import Candidate, Guest
from quorumboard.models.room import RoomRole

logger = logging.getLogger(__name__)


def add_guest(
    db: Session,
    ctx: SessionContext,
    room_id: str,
    name: str,
    note: Optional[str] = None,
    candidate_id: Optional[str] = None,
) -> Guest:
    get_membership(db, room_id, ctx.user_id)
    if candidate_id is not None:
        candidate = db.query(Candidate).filter(Candidate.candidate_id == candidate_id).first()
        if not candidate or candidate.room_id != room_id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Candidate not found in this room")

    guest = Guest(room_id=room_id, candidate_id=candidate_id, name=name, note=note, created_by=ctx.user_id)
    db.add(guest)
    db.commit()
    db.refresh(guest)
    logger.info("User %s added guest %s to room %s (candidate %s)", ctx.user_id, guest.guest_id, room_id, candidate_id)
    return guest


def list_guests(
    db: Session,
    ctx: SessionContext,
    room_id: str,
    candidate_id: Optional[str] = None,
) -> list[Guest]:
    get_membership(db, room_id, ctx.user_id)
    query = db.query(Guest).filter(Guest.room_id == room_id)
    if candidate_id:
        query = query.filter(Guest.candidate_id == candidate_id)
    return query.order_by(Guest.created_at).all()


def delete_guest(db: Session, ctx: SessionContext, guest_id: str) -> None:
    """A guest may be removed by whoever added it or by a room owner."""
    guest = db.query(Guest).filter(Guest.guest_id == guest_id).first()
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    member = get_membership(db, guest.room_id, ctx.user_id)
    if guest.created_by != ctx.user_id and not has_role(member, RoomRole.owner):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the member who added this guest or the room owner may remove it",
        )
    db.delete(guest)
    db.commit()
    logger.info("User %s removed guest %s from room %s", ctx.user_id, guest_id, guest.room_id)
