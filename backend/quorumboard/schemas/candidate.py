"""Pydantic schemas for Candidates, Responses and Guests."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from quorumboard.models.candidate import ResponseStatus
from quorumboard.schemas.auth import required_text

MIN_PLAYERS_FLOOR = 2
MIN_PLAYERS_CEILING = 20


class CandidateCreate(BaseModel):
    date: date
    min_players: int = Field(4, ge=MIN_PLAYERS_FLOOR, le=MIN_PLAYERS_CEILING)


class ResponseUpsert(BaseModel):
    status: ResponseStatus


class TallyOut(BaseModel):
    yes_members: int
    maybe: int
    no: int
    guest_count: int
    yes_total: int
    minimum: int
    quorum_reached: bool
    remaining: int

    model_config = {"from_attributes": True}


class ResponseOut(BaseModel):
    candidate_id: str
    user_id: str
    display_name: Optional[str] = None
    status: ResponseStatus
    updated_at: Optional[datetime] = None


class GuestCreate(BaseModel):
    name: str
    note: Optional[str] = None
    candidate_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return required_text(v, "Guest name", 100)

    @field_validator("note")
    @classmethod
    def _note(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class GuestOut(BaseModel):
    guest_id: str
    room_id: str
    candidate_id: Optional[str] = None
    name: str
    note: Optional[str] = None
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CandidateOut(BaseModel):
    candidate_id: str
    room_id: str
    date: date
    min_players: int
    is_confirmed: bool
    created_by: str
    created_at: datetime
    event_id: Optional[str] = None
    my_status: Optional[ResponseStatus] = None
    tally: TallyOut


class CandidateDetailOut(CandidateOut):
    responses: list[ResponseOut] = []
    guests: list[GuestOut] = []
