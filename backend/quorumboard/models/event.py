"""Event ORM model — the confirmed outcome of a candidate."""
import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from quorumboard.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_id = Column(String(36), ForeignKey("rooms.room_id"), nullable=False, index=True)
    candidate_id = Column(String(36), ForeignKey("candidates.candidate_id"), nullable=False, unique=True)
    starts_at = Column(DateTime(timezone=True), nullable=True)
    note = Column(Text, nullable=True)
    confirmed_by = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    confirmed_at = Column(DateTime(timezone=True), server_default=func.now())

    candidate = relationship("Candidate", back_populates="event")

    # Date and threshold live on the originating candidate
    @property
    def date(self):
        return self.candidate.date

    @property
    def min_players(self) -> int:
        return self.candidate.min_players
