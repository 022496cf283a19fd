"""Event service — confirming candidates into events and reading them back.

Responsibilities:
- Confirmation procedure: owner-only, quorum recomputed server-side
- Un-confirm: deleting the event clears the candidate's confirmed flag
- Participants re-derived from response and guest rows on every read
- Start time handling: local HH:MM on the event date, stored as UTC
- Share text for pasting into a group chat
"""
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorumboard.config import settings
from quorumboard.dependencies import SessionContext, get_membership, ensure_owner
from quorumboard.models.candidate import Candidate, Response, ResponseStatus, Guest
from quorumboard.models.event import Event
from quorumboard.models.room import RoomMember
from quorumboard.schemas.event import EventOut, EventDetailOut, EventUpdate, ParticipantOut
from quorumboard.services.attendance import tally_candidate
from quorumboard.services.candidate_service import get_candidate, room_rows
from quorumboard.timeutils import combine_local, format_local_hhmm, parse_hhmm

logger = logging.getLogger(__name__)


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


def confirm_candidate(db: Session, ctx: SessionContext, candidate_id: str) -> Event:
    """Promote a candidate that reached quorum into an event.

    The tally is recomputed from stored rows, so an owner cannot confirm a
    candidate the board merely showed as reached before someone changed
    their answer.
    """
    candidate = get_candidate(db, candidate_id)
    ensure_owner(get_membership(db, candidate.room_id, ctx.user_id), "confirm events")

    if candidate.is_confirmed or candidate.event is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Candidate is already confirmed")

    responses, guests = room_rows(db, candidate.room_id)
    tally = tally_candidate(responses, guests, candidate.candidate_id, candidate.min_players)
    if not tally.quorum_reached:
        logger.warning(
            "Rejected confirmation of candidate %s: %d/%d attending",
            candidate_id, tally.yes_total, candidate.min_players,
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Quorum not reached: {tally.yes_total}/{candidate.min_players} attending, "
                   f"{tally.remaining} more needed",
        )

    event = Event(
        room_id=candidate.room_id,
        candidate_id=candidate.candidate_id,
        starts_at=combine_local(candidate.date, parse_hhmm(settings.DEFAULT_START_TIME)),
        confirmed_by=ctx.user_id,
    )
    candidate.is_confirmed = True
    db.add(event)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Candidate is already confirmed")
    db.refresh(event)
    logger.info("Confirmed candidate %s as event %s by owner %s", candidate_id, event.event_id, ctx.user_id)
    return event


def unconfirm_event(db: Session, ctx: SessionContext, event_id: str) -> None:
    """Owner-only; deletes the event and returns its candidate to the board."""
    event = get_event(db, event_id)
    ensure_owner(get_membership(db, event.room_id, ctx.user_id), "cancel confirmed events")
    candidate = event.candidate
    candidate.is_confirmed = False
    candidate.event = None
    db.commit()
    logger.info("Un-confirmed event %s (candidate %s)", event_id, candidate.candidate_id)


def update_event(db: Session, ctx: SessionContext, event_id: str, payload: EventUpdate) -> Event:
    """Set the start time and/or note. Fields left out of the payload are untouched."""
    event = get_event(db, event_id)
    get_membership(db, event.room_id, ctx.user_id)

    fields = payload.model_fields_set
    if "start_time" in fields:
        event.starts_at = (
            combine_local(event.date, parse_hhmm(payload.start_time)) if payload.start_time else None
        )
    if "note" in fields:
        event.note = payload.note
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s (%s)", event_id, ", ".join(sorted(fields)) or "no changes")
    return event


def list_events(db: Session, ctx: SessionContext, room_id: str) -> list[EventOut]:
    get_membership(db, room_id, ctx.user_id)
    events = (
        db.query(Event)
        .join(Candidate, Candidate.candidate_id == Event.candidate_id)
        .filter(Event.room_id == room_id)
        .order_by(Candidate.date)
        .all()
    )
    return [event_out(e) for e in events]


def event_out(event: Event, model=EventOut, **extra):
    return model(
        event_id=event.event_id,
        room_id=event.room_id,
        candidate_id=event.candidate_id,
        date=event.date,
        min_players=event.min_players,
        starts_at=event.starts_at,
        start_time=format_local_hhmm(event.starts_at) if event.starts_at else None,
        note=event.note,
        confirmed_by=event.confirmed_by,
        confirmed_at=event.confirmed_at,
        **extra,
    )


def participants_for(db: Session, event: Event, viewer_id: str) -> list[ParticipantOut]:
    """Members who answered yes (by name), then the candidate's guests (by name)."""
    yes_ids = {
        r.user_id
        for r in db.query(Response).filter(
            Response.room_id == event.room_id,
            Response.candidate_id == event.candidate_id,
            Response.status == ResponseStatus.yes,
        )
    }
    members = db.query(RoomMember).filter(RoomMember.room_id == event.room_id).all()
    guests = (
        db.query(Guest)
        .filter(Guest.room_id == event.room_id, Guest.candidate_id == event.candidate_id)
        .all()
    )

    member_rows = sorted(
        (
            ParticipantOut(
                key=f"m-{m.user_id}",
                kind="member",
                display_name=m.display_name,
                is_me=m.user_id == viewer_id,
            )
            for m in members
            if m.user_id in yes_ids
        ),
        key=lambda p: p.display_name,
    )
    guest_rows = sorted(
        (ParticipantOut(key=f"g-{g.guest_id}", kind="guest", display_name=g.name, note=g.note) for g in guests),
        key=lambda p: p.display_name,
    )
    return member_rows + guest_rows


def share_text(event: Event, participant_count: int) -> str:
    lines = [
        "[Event confirmed]",
        f"Date: {event.date.isoformat()}",
        f"Start: {format_local_hhmm(event.starts_at) if event.starts_at else 'TBD'}",
        f"Participants: {participant_count} (members + guests)",
        f"URL: {settings.PUBLIC_BASE_URL.rstrip('/')}/event/{event.event_id}",
    ]
    if event.note:
        lines.append(f"Note: {event.note}")
    return "\n".join(lines)


def event_detail(db: Session, ctx: SessionContext, event_id: str) -> EventDetailOut:
    event = get_event(db, event_id)
    get_membership(db, event.room_id, ctx.user_id)
    participants = participants_for(db, event, ctx.user_id)
    return event_out(
        event,
        model=EventDetailOut,
        participants=participants,
        share_text=share_text(event, len(participants)),
    )
