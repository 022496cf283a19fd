"""Candidate date and attendance response API routes."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from quorumboard.database import get_db
from quorumboard.dependencies import SessionContext, get_session_context
from quorumboard.schemas.candidate import (
    CandidateCreate,
    CandidateOut,
    CandidateDetailOut,
    ResponseUpsert,
    ResponseOut,
)
from quorumboard.schemas.event import ConfirmOut
from quorumboard.services import candidate_service, event_service

router = APIRouter()


def _response_out(response) -> ResponseOut:
    return ResponseOut(
        candidate_id=response.candidate_id,
        user_id=response.user_id,
        status=response.status,
        updated_at=response.updated_at,
    )


@router.post("/rooms/{room_id}/candidates", response_model=CandidateOut, status_code=status.HTTP_201_CREATED)
def create_candidate(
    room_id: str,
    payload: CandidateCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Propose a date. Any member may; the threshold must be within 2-20."""
    candidate = candidate_service.create_candidate(db, ctx, room_id, payload.date, payload.min_players)
    return candidate_service.candidate_detail(db, ctx, candidate.candidate_id)


@router.get("/rooms/{room_id}/candidates", response_model=list[CandidateOut])
def list_candidates(
    room_id: str,
    include_past: bool = Query(False),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Candidates with their tallies, upcoming dates only unless include_past."""
    return candidate_service.list_candidates(db, ctx, room_id, include_past=include_past)


@router.get("/candidates/{candidate_id}", response_model=CandidateDetailOut)
def get_candidate(
    candidate_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return candidate_service.candidate_detail(db, ctx, candidate_id)


@router.delete("/candidates/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_candidate(
    candidate_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Delete a candidate with its responses, guests and event (owner only)."""
    candidate_service.delete_candidate(db, ctx, candidate_id)


@router.put("/candidates/{candidate_id}/responses/me", response_model=ResponseOut)
def set_my_response(
    candidate_id: str,
    payload: ResponseUpsert,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Set or overwrite the caller's answer."""
    response = candidate_service.upsert_response(db, ctx, candidate_id, payload.status)
    return _response_out(response)


@router.put("/candidates/{candidate_id}/responses/{user_id}", response_model=ResponseOut)
def set_member_response(
    candidate_id: str,
    user_id: str,
    payload: ResponseUpsert,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Set another member's answer (owner only)."""
    response = candidate_service.upsert_response(db, ctx, candidate_id, payload.status, user_id=user_id)
    return _response_out(response)


@router.post("/candidates/{candidate_id}/confirm", response_model=ConfirmOut, status_code=status.HTTP_201_CREATED)
def confirm_candidate(
    candidate_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Turn a candidate that reached quorum into an event (owner only)."""
    event = event_service.confirm_candidate(db, ctx, candidate_id)
    return ConfirmOut(event_id=event.event_id)
