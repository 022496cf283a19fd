"""Candidate date, Response and Guest ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Date, DateTime, Integer, Boolean, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from quorumboard.database import Base


class ResponseStatus(str, enum.Enum):
    yes = "yes"
    maybe = "maybe"
    no = "no"


class Candidate(Base):
    __tablename__ = "candidates"

    candidate_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_id = Column(String(36), ForeignKey("rooms.room_id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    min_players = Column(Integer, nullable=False, default=4)
    is_confirmed = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    room = relationship("Room", back_populates="candidates")
    responses = relationship("Response", back_populates="candidate", cascade="all, delete-orphan")
    guests = relationship("Guest", back_populates="candidate", cascade="all, delete-orphan")
    event = relationship("Event", back_populates="candidate", uselist=False, cascade="all, delete-orphan")


class Response(Base):
    """Attendance intention. Primary key (candidate_id, user_id) makes it an upsert target."""

    __tablename__ = "responses"

    candidate_id = Column(String(36), ForeignKey("candidates.candidate_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    room_id = Column(String(36), ForeignKey("rooms.room_id"), nullable=False, index=True)
    status = Column(SAEnum(ResponseStatus), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    candidate = relationship("Candidate", back_populates="responses")


class Guest(Base):
    __tablename__ = "room_guests"

    guest_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_id = Column(String(36), ForeignKey("rooms.room_id"), nullable=False, index=True)
    candidate_id = Column(String(36), ForeignKey("candidates.candidate_id"), nullable=True)
    name = Column(String(100), nullable=False)
    note = Column(Text, nullable=True)
    created_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    room = relationship("Room", back_populates="guests")
    candidate = relationship("Candidate", back_populates="guests")
