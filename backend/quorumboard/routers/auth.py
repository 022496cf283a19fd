"""Auth API routes — sign-up, sign-in, sign-out, session, credentials."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quorumboard.database import get_db
from quorumboard.dependencies import SessionContext, get_session_context
from quorumboard.schemas.auth import (
    SignUpRequest,
    LoginRequest,
    TokenOut,
    SessionOut,
    UserOut,
    PasswordChange,
    PasswordResetRequest,
    PasswordResetConfirm,
)
from quorumboard.services import auth_service
from quorumboard.timeutils import as_utc

router = APIRouter()


def _token_out(db: Session, user) -> TokenOut:
    token, session = auth_service.open_session(db, user)
    return TokenOut(
        access_token=token,
        expires_at=as_utc(session.expires_at),
        user=UserOut.model_validate(user),
    )


@router.post("/signup", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignUpRequest, db: Session = Depends(get_db)):
    """Create an account and sign it in."""
    user = auth_service.create_user(db, payload.email, payload.password, payload.display_name)
    return _token_out(db, user)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, payload.email, payload.password)
    return _token_out(db, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(ctx: SessionContext = Depends(get_session_context), db: Session = Depends(get_db)):
    """Revoke the current session; its token stops working immediately."""
    auth_service.revoke_session(db, ctx.session_id)


@router.get("/session", response_model=SessionOut)
def get_session(ctx: SessionContext = Depends(get_session_context)):
    return SessionOut(
        session_id=ctx.session_id,
        expires_at=ctx.expires_at,
        user=UserOut.model_validate(ctx.user),
    )


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: PasswordChange,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Change the password; every other session is signed out."""
    auth_service.change_password(db, ctx.user, ctx.session_id, payload.current_password, payload.new_password)


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
def request_password_reset(payload: PasswordResetRequest, db: Session = Depends(get_db)):
    """Email a reset link. The answer is the same whether or not the address exists."""
    auth_service.request_password_reset(db, payload.email)
    return {"status": "ok"}


@router.post("/password-reset/confirm", status_code=status.HTTP_204_NO_CONTENT)
def confirm_password_reset(payload: PasswordResetConfirm, db: Session = Depends(get_db)):
    auth_service.complete_password_reset(db, payload.token, payload.new_password)
