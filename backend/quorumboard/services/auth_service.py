"""Auth service — password hashing, session tokens, password reset.

Tokens are HS256 JWTs whose ``sid`` claim names an AuthSession row. A token
is accepted only while its signature and ``exp`` verify and the session row
exists without ``revoked_at``, so signing out takes effect immediately.
"""
import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quorumboard.config import settings
from quorumboard.models.user import User, AuthSession, PasswordReset
from quorumboard.services import notifications
from quorumboard.timeutils import utcnow, as_utc

logger = logging.getLogger(__name__)


def _pwd_bytes(password: str, max_len: int = 72) -> bytes:
    return password.encode("utf-8")[:max_len]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_user(db: Session, email: str, password: str, display_name: str) -> User:
    """Sign-up: create the account and its profile name."""
    user = User(
        email=normalize_email(email),
        password_hash=hash_password(password),
        display_name=display_name,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This email is already registered")
    db.refresh(user)
    logger.info("Registered user %s", user.user_id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    return user


def open_session(db: Session, user: User) -> tuple[str, AuthSession]:
    """Create a session row and the bearer token that refers to it."""
    expires = utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    session = AuthSession(user_id=user.user_id, expires_at=expires)
    db.add(session)
    db.commit()
    db.refresh(session)

    payload = {"sub": user.user_id, "sid": session.session_id, "exp": expires}
    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    logger.info("Opened session %s for user %s", session.session_id, user.user_id)
    return token, session


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.info("Rejected token: %s", e)
        return None


def resolve_session(db: Session, token: str) -> tuple[User, AuthSession]:
    """Map a bearer token to its live (user, session) pair or raise 401."""
    payload = decode_token(token)
    if not payload or "sid" not in payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired session")

    session = db.query(AuthSession).filter(AuthSession.session_id == payload["sid"]).first()
    if not session or session.revoked_at is not None or session.user_id != payload.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session has ended")
    if as_utc(session.expires_at) <= utcnow():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired session")

    user = db.query(User).filter(User.user_id == session.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user, session


def revoke_session(db: Session, session_id: str) -> None:
    session = db.query(AuthSession).filter(AuthSession.session_id == session_id).first()
    if session and session.revoked_at is None:
        session.revoked_at = utcnow()
        db.commit()
        logger.info("Revoked session %s", session_id)


def revoke_user_sessions(db: Session, user_id: str, keep_session_id: Optional[str] = None) -> int:
    now = utcnow()
    sessions = (
        db.query(AuthSession)
        .filter(AuthSession.user_id == user_id, AuthSession.revoked_at.is_(None))
        .all()
    )
    count = 0
    for s in sessions:
        if s.session_id == keep_session_id:
            continue
        s.revoked_at = now
        count += 1
    return count


def change_password(db: Session, user: User, session_id: str, current_password: str, new_password: str) -> None:
    """Credential update: other sessions are signed out, the caller's stays valid."""
    if not verify_password(current_password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")
    user.password_hash = hash_password(new_password)
    revoked = revoke_user_sessions(db, user.user_id, keep_session_id=session_id)
    db.commit()
    logger.info("User %s changed password (%d other sessions revoked)", user.user_id, revoked)


def request_password_reset(db: Session, email: str) -> None:
    """Email a one-time reset link. Silent when the address is unknown."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user:
        logger.info("Password reset requested for unknown email")
        return

    token = secrets.token_urlsafe(32)
    reset = PasswordReset(
        user_id=user.user_id,
        token_hash=_hash_token(token),
        expires_at=utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
    )
    db.add(reset)
    db.commit()

    link = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/reset-password?token={token}"
    notifications.send_email(
        user.email,
        "Reset your password",
        f"Open this link to choose a new password:\n{link}\n\n"
        f"The link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes.",
    )
    logger.info("Password reset %s issued for user %s", reset.reset_id, user.user_id)


def complete_password_reset(db: Session, token: str, new_password: str) -> None:
    reset = db.query(PasswordReset).filter(PasswordReset.token_hash == _hash_token(token)).first()
    if not reset or reset.used_at is not None or as_utc(reset.expires_at) <= utcnow():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reset link is invalid or expired")

    user = db.query(User).filter(User.user_id == reset.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reset link is invalid or expired")

    user.password_hash = hash_password(new_password)
    reset.used_at = utcnow()
    revoke_user_sessions(db, user.user_id)
    db.commit()
    logger.info("Password reset %s completed for user %s", reset.reset_id, user.user_id)
