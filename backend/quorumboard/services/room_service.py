"""Room service — creation, invite redemption and membership management."""
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorumboard.config import settings
from quorumboard.database import is_duplicate_key
from quorumboard.dependencies import SessionContext, get_membership, require_owner
from quorumboard.models.candidate import Response
from quorumboard.models.room import Room, RoomMember, RoomRole
from quorumboard.models.user import User
from quorumboard.schemas.room import RoomOut, RoomMemberOut, RoomSummaryOut

logger = logging.getLogger(__name__)


def invite_url(room: Room) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/join/{room.invite_code}"


def default_display_name(user: User) -> str:
    """Profile name, or the local part of the email when no profile name is set."""
    return user.display_name or user.email.split("@")[0]


def room_out(room: Room) -> RoomOut:
    return RoomOut(
        room_id=room.room_id,
        name=room.name,
        invite_code=room.invite_code,
        invite_url=invite_url(room),
        created_by=room.created_by,
        created_at=room.created_at,
        members=[RoomMemberOut.model_validate(m) for m in room.members],
    )


def create_room(db: Session, ctx: SessionContext, name: str) -> Room:
    """Create a room; the creator becomes its owner."""
    room = Room(name=name, created_by=ctx.user_id)
    db.add(room)
    db.flush()

    owner = RoomMember(
        room_id=room.room_id,
        user_id=ctx.user_id,
        display_name=default_display_name(ctx.user),
        role=RoomRole.owner,
    )
    db.add(owner)
    db.commit()
    db.refresh(room)
    logger.info("Created room '%s' (%s) by user %s", room.name, room.room_id, ctx.user_id)
    return room


def list_my_rooms(db: Session, ctx: SessionContext) -> list[RoomSummaryOut]:
    rows = (
        db.query(Room, RoomMember)
        .join(RoomMember, RoomMember.room_id == Room.room_id)
        .filter(RoomMember.user_id == ctx.user_id)
        .order_by(Room.created_at.desc())
        .all()
    )
    return [
        RoomSummaryOut(
            room_id=room.room_id,
            name=room.name,
            invite_code=room.invite_code,
            invite_url=invite_url(room),
            my_role=member.role.value,
            created_at=room.created_at,
        )
        for room, member in rows
    ]


def get_room(db: Session, ctx: SessionContext, room_id: str) -> Room:
    get_membership(db, room_id, ctx.user_id)
    return db.query(Room).filter(Room.room_id == room_id).one()


def rename_room(db: Session, ctx: SessionContext, room_id: str, name: str) -> Room:
    require_owner(db, room_id, ctx, "rename the room")
    room = db.query(Room).filter(Room.room_id == room_id).one()
    room.name = name
    db.commit()
    db.refresh(room)
    logger.info("Renamed room %s to '%s'", room_id, name)
    return room


def join_room_by_invite(db: Session, ctx: SessionContext, invite_code: str) -> tuple[str, bool]:
    """Redeem an invite code. Returns (room_id, already_member).

    Joining a room twice is not an error: a duplicate-key failure on the
    membership insert means a concurrent request already joined.
    """
    room = db.query(Room).filter(Room.invite_code == invite_code).first()
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invite code is invalid")

    existing = (
        db.query(RoomMember)
        .filter(RoomMember.room_id == room.room_id, RoomMember.user_id == ctx.user_id)
        .first()
    )
    if existing:
        return room.room_id, True

    db.add(RoomMember(
        room_id=room.room_id,
        user_id=ctx.user_id,
        display_name=default_display_name(ctx.user),
        role=RoomRole.member,
    ))
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_duplicate_key(e):
            logger.info("User %s already joined room %s (concurrent join)", ctx.user_id, room.room_id)
            return room.room_id, True
        raise
    logger.info("User %s joined room %s by invite", ctx.user_id, room.room_id)
    return room.room_id, False


def update_my_member_name(db: Session, ctx: SessionContext, room_id: str, display_name: str) -> RoomMember:
    member = get_membership(db, room_id, ctx.user_id)
    member.display_name = display_name
    db.commit()
    db.refresh(member)
    logger.info("User %s renamed themselves in room %s", ctx.user_id, room_id)
    return member


def update_profile_name(db: Session, user: User, display_name: str) -> User:
    """Set the profile name and align every membership display name with it."""
    user.display_name = display_name
    (
        db.query(RoomMember)
        .filter(RoomMember.user_id == user.user_id)
        .update({RoomMember.display_name: display_name}, synchronize_session=False)
    )
    db.commit()
    db.refresh(user)
    logger.info("Updated profile name for user %s", user.user_id)
    return user


def remove_member(db: Session, ctx: SessionContext, room_id: str, user_id: str) -> None:
    """Owner removes a member; their responses in the room go with the membership."""
    require_owner(db, room_id, ctx, "remove members")
    if user_id == ctx.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The owner cannot remove themself")

    member = (
        db.query(RoomMember)
        .filter(RoomMember.room_id == room_id, RoomMember.user_id == user_id)
        .first()
    )
    if not member:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Membership not found")

    removed = (
        db.query(Response)
        .filter(Response.room_id == room_id, Response.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.delete(member)
    db.commit()
    logger.info("Removed user %s from room %s (%d responses dropped)", user_id, room_id, removed)
