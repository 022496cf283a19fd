"""Pydantic schemas for Events."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from quorumboard.timeutils import parse_hhmm


class EventUpdate(BaseModel):
    start_time: Optional[str] = None  # HH:MM, local time on the event date
    note: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def _start_time(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        try:
            return parse_hhmm(v).strftime("%H:%M")
        except ValueError:
            raise ValueError("Start time must be HH:MM")

    @field_validator("note")
    @classmethod
    def _note(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class ConfirmOut(BaseModel):
    event_id: str


class ParticipantOut(BaseModel):
    key: str
    kind: str  # member, guest
    display_name: str
    note: Optional[str] = None
    is_me: bool = False


class EventOut(BaseModel):
    event_id: str
    room_id: str
    candidate_id: str
    date: date
    min_players: int
    starts_at: Optional[datetime] = None
    start_time: Optional[str] = None
    note: Optional[str] = None
    confirmed_by: str
    confirmed_at: datetime


class EventDetailOut(EventOut):
    participants: list[ParticipantOut] = []
    share_text: str
