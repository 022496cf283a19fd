"""Profile API routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quorumboard.database import get_db
from quorumboard.dependencies import SessionContext, get_session_context
from quorumboard.schemas.auth import ProfileUpdate, UserOut
from quorumboard.services import room_service

router = APIRouter()


@router.get("", response_model=UserOut)
def get_profile(ctx: SessionContext = Depends(get_session_context)):
    return ctx.user


@router.patch("", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Change the display name here and in every room the user belongs to."""
    return room_service.update_profile_name(db, ctx.user, payload.display_name)
