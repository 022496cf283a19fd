"""Room and RoomMember ORM models."""
import uuid
import enum
import secrets
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from quorumboard.database import Base


class RoomRole(str, enum.Enum):
    owner = "owner"
    member = "member"


def generate_invite_code() -> str:
    return secrets.token_hex(8)


class Room(Base):
    __tablename__ = "rooms"

    room_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    invite_code = Column(String(32), nullable=False, unique=True, default=generate_invite_code)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship(
        "RoomMember",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="RoomMember.created_at",
    )
    candidates = relationship("Candidate", back_populates="room", cascade="all, delete-orphan")
    guests = relationship("Guest", back_populates="room", cascade="all, delete-orphan")


class RoomMember(Base):
    __tablename__ = "room_members"

    room_id = Column(String(36), ForeignKey("rooms.room_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    display_name = Column(String(100), nullable=False)
    role = Column(SAEnum(RoomRole), nullable=False, default=RoomRole.member)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    room = relationship("Room", back_populates="members")

    @property
    def is_owner(self) -> bool:
        return self.role == RoomRole.owner
