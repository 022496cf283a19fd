"""Shared dependencies: session context and room-level authorization."""
from dataclasses import dataclass
from datetime import datetime

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from quorumboard.database import get_db
from quorumboard.models.user import User
from quorumboard.models.room import Room, RoomMember, RoomRole
from quorumboard.services import auth_service
from quorumboard.timeutils import as_utc

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """The signed-in caller, resolved once per request and passed to handlers."""

    user: User
    session_id: str
    expires_at: datetime

    @property
    def user_id(self) -> str:
        return self.user.user_id


def get_session_context(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> SessionContext:
    if not credentials or not (credentials.credentials or "").strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    user, session = auth_service.resolve_session(db, credentials.credentials.strip())
    return SessionContext(user=user, session_id=session.session_id, expires_at=as_utc(session.expires_at))


def get_membership(db: Session, room_id: str, user_id: str) -> RoomMember:
    """Row-level check: the caller must belong to the room."""
    room = db.query(Room).filter(Room.room_id == room_id).first()
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    member = (
        db.query(RoomMember)
        .filter(RoomMember.room_id == room_id, RoomMember.user_id == user_id)
        .first()
    )
    if not member:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not a member of this room")
    return member


def has_role(member: RoomMember, role: RoomRole) -> bool:
    return member.role == role


def ensure_owner(member: RoomMember, action: str = "do this") -> None:
    if not has_role(member, RoomRole.owner):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Only the room owner may {action}")


def require_owner(db: Session, room_id: str, ctx: SessionContext, action: str = "do this") -> RoomMember:
    member = get_membership(db, room_id, ctx.user_id)
    ensure_owner(member, action)
    return member
