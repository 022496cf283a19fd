"""Candidate service — candidate dates, attendance responses and board tallies.

Every listing is rebuilt from the room's full response and guest rows through
``attendance.tally_candidate``; nothing is counted incrementally.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorumboard.database import is_duplicate_key
from quorumboard.dependencies import SessionContext, get_membership, ensure_owner
from quorumboard.models.candidate import Candidate, Response, ResponseStatus, Guest
from quorumboard.models.room import RoomMember
from quorumboard.schemas.candidate import CandidateOut, CandidateDetailOut, ResponseOut, GuestOut, TallyOut
from quorumboard.services.attendance import tally_candidate, status_of
from quorumboard.timeutils import local_today

logger = logging.getLogger(__name__)


def get_candidate(db: Session, candidate_id: str) -> Candidate:
    candidate = db.query(Candidate).filter(Candidate.candidate_id == candidate_id).first()
    if not candidate:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Candidate not found")
    return candidate


def room_rows(db: Session, room_id: str) -> tuple[list[Response], list[Guest]]:
    """All response and guest rows of one room, the input the aggregator works from."""
    responses = db.query(Response).filter(Response.room_id == room_id).all()
    guests = db.query(Guest).filter(Guest.room_id == room_id).all()
    return responses, guests


def _candidate_out(
    candidate: Candidate,
    room_responses: list[Response],
    room_guests: list[Guest],
    viewer_id: str,
    model=CandidateOut,
    **extra,
):
    tally = tally_candidate(room_responses, room_guests, candidate.candidate_id, candidate.min_players)
    return model(
        candidate_id=candidate.candidate_id,
        room_id=candidate.room_id,
        date=candidate.date,
        min_players=candidate.min_players,
        is_confirmed=candidate.is_confirmed,
        created_by=candidate.created_by,
        created_at=candidate.created_at,
        event_id=candidate.event.event_id if candidate.event else None,
        my_status=status_of(room_responses, candidate.candidate_id, viewer_id),
        tally=TallyOut.model_validate(tally),
        **extra,
    )


def create_candidate(db: Session, ctx: SessionContext, room_id: str, day: date, min_players: int) -> Candidate:
    get_membership(db, room_id, ctx.user_id)
    candidate = Candidate(
        room_id=room_id,
        date=day,
        min_players=min_players,
        created_by=ctx.user_id,
    )
    db.add(candidate)
    db.commit()
    db.refresh(candidate)
    logger.info("Created candidate %s (%s, min %d) in room %s", candidate.candidate_id, day, min_players, room_id)
    return candidate


def list_candidates(
    db: Session,
    ctx: SessionContext,
    room_id: str,
    include_past: bool = False,
) -> list[CandidateOut]:
    """The room board: candidates by date, each with its tally and the caller's own answer."""
    get_membership(db, room_id, ctx.user_id)
    query = db.query(Candidate).filter(Candidate.room_id == room_id)
    if not include_past:
        query = query.filter(Candidate.date >= local_today())
    candidates = query.order_by(Candidate.date, Candidate.created_at).all()

    responses, guests = room_rows(db, room_id)
    return [_candidate_out(c, responses, guests, ctx.user_id) for c in candidates]


def candidate_detail(db: Session, ctx: SessionContext, candidate_id: str) -> CandidateDetailOut:
    candidate = get_candidate(db, candidate_id)
    get_membership(db, candidate.room_id, ctx.user_id)
    responses, guests = room_rows(db, candidate.room_id)

    names = {
        m.user_id: m.display_name
        for m in db.query(RoomMember).filter(RoomMember.room_id == candidate.room_id).all()
    }
    own = [r for r in responses if r.candidate_id == candidate_id]
    own.sort(key=lambda r: names.get(r.user_id, ""))
    return _candidate_out(
        candidate,
        responses,
        guests,
        ctx.user_id,
        model=CandidateDetailOut,
        responses=[
            ResponseOut(
                candidate_id=r.candidate_id,
                user_id=r.user_id,
                display_name=names.get(r.user_id),
                status=r.status,
                updated_at=r.updated_at,
            )
            for r in own
        ],
        guests=[GuestOut.model_validate(g) for g in guests if g.candidate_id == candidate_id],
    )


def delete_candidate(db: Session, ctx: SessionContext, candidate_id: str) -> None:
    """Owner-only; removes responses, candidate guests and any event with it."""
    candidate = get_candidate(db, candidate_id)
    ensure_owner(get_membership(db, candidate.room_id, ctx.user_id), "delete candidates")
    db.delete(candidate)
    db.commit()
    logger.info("Deleted candidate %s from room %s", candidate_id, candidate.room_id)


def upsert_response(
    db: Session,
    ctx: SessionContext,
    candidate_id: str,
    response_status: ResponseStatus,
    user_id: Optional[str] = None,
) -> Response:
    """Write the (candidate, user) response, overwriting any earlier answer.

    ``user_id`` defaults to the caller; answering for someone else requires the
    owner role, and the target must be a member of the room.
    """
    candidate = get_candidate(db, candidate_id)
    actor = get_membership(db, candidate.room_id, ctx.user_id)
    target_id = user_id or ctx.user_id
    if target_id != ctx.user_id:
        ensure_owner(actor, "answer for other members")
        target = (
            db.query(RoomMember)
            .filter(RoomMember.room_id == candidate.room_id, RoomMember.user_id == target_id)
            .first()
        )
        if not target:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User is not a member of this room")

    response = _write_response(db, candidate, target_id, response_status)
    logger.info(
        "User %s set response '%s' for %s on candidate %s",
        ctx.user_id, response_status.value, target_id, candidate_id,
    )
    return response


def _write_response(db: Session, candidate: Candidate, user_id: str, response_status: ResponseStatus) -> Response:
    key = {"candidate_id": candidate.candidate_id, "user_id": user_id}
    response = db.query(Response).filter_by(**key).first()
    if response:
        response.status = response_status
        db.commit()
        db.refresh(response)
        return response

    db.add(Response(room_id=candidate.room_id, status=response_status, **key))
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_duplicate_key(e):
            raise
        # A concurrent request inserted the row first; overwrite it
        response = db.query(Response).filter_by(**key).one()
        response.status = response_status
        db.commit()
    return db.query(Response).filter_by(**key).one()
