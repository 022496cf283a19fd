"""Room API routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quorumboard.database import get_db
from quorumboard.dependencies import SessionContext, get_session_context
from quorumboard.schemas.room import (
    RoomCreate,
    RoomRename,
    RoomJoin,
    RoomJoinOut,
    RoomOut,
    RoomSummaryOut,
    RoomMemberOut,
    MemberNameUpdate,
)
from quorumboard.services import room_service

router = APIRouter()


@router.post("/", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Create a room. The creator is added as owner and receives the invite link."""
    room = room_service.create_room(db, ctx, payload.name)
    return room_service.room_out(room)


@router.get("/", response_model=list[RoomSummaryOut])
def list_rooms(ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """Rooms the caller belongs to, newest first."""
    return room_service.list_my_rooms(db, ctx)


@router.post("/join", response_model=RoomJoinOut)
def join_room(
    payload: RoomJoin,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Redeem an invite code. Safe to repeat."""
    room_id, already = room_service.join_room_by_invite(db, ctx, payload.invite_code)
    return RoomJoinOut(room_id=room_id, already_member=already)


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: str, ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    return room_service.room_out(room_service.get_room(db, ctx, room_id))


@router.patch("/{room_id}", response_model=RoomOut)
def rename_room(
    room_id: str,
    payload: RoomRename,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    room = room_service.rename_room(db, ctx, room_id, payload.name)
    return room_service.room_out(room)


@router.patch("/{room_id}/members/me", response_model=RoomMemberOut)
def update_my_member_name(
    room_id: str,
    payload: MemberNameUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return room_service.update_my_member_name(db, ctx, room_id, payload.display_name)


@router.delete("/{room_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    room_id: str,
    user_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Remove a member (owner only)."""
    room_service.remove_member(db, ctx, room_id, user_id)
