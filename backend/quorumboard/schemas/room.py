"""Pydantic schemas for Rooms and memberships."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, field_validator

from quorumboard.schemas.auth import required_text


class RoomCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return required_text(v, "Room name", 150)


class RoomRename(RoomCreate):
    pass


class RoomJoin(BaseModel):
    invite_code: str

    @field_validator("invite_code")
    @classmethod
    def _code(cls, v: str) -> str:
        return required_text(v, "Invite code", 32)


class RoomJoinOut(BaseModel):
    room_id: str
    already_member: bool = False


class MemberNameUpdate(BaseModel):
    display_name: str

    @field_validator("display_name")
    @classmethod
    def _display_name(cls, v: str) -> str:
        return required_text(v, "Display name", 100)


class RoomMemberOut(BaseModel):
    user_id: str
    display_name: str
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RoomOut(BaseModel):
    room_id: str
    name: str
    invite_code: str
    invite_url: str
    created_by: str
    created_at: datetime
    members: list[RoomMemberOut] = []


class RoomSummaryOut(BaseModel):
    room_id: str
    name: str
    invite_code: str
    invite_url: str
    my_role: str
    created_at: datetime


RoomOut.model_rebuild()
