"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from quorumboard.config import settings
from quorumboard.database import Base, engine

# Import routers
from quorumboard.routers import auth, profile, rooms, candidates, guests, events

# Import all models so Base.metadata knows about them
from quorumboard.models.user import User, AuthSession, PasswordReset  # noqa: F401
from quorumboard.models.room import Room, RoomMember                  # noqa: F401
from quorumboard.models.candidate import Candidate, Response, Guest   # noqa: F401
from quorumboard.models.event import Event                            # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

app = FastAPI(
    title="Quorum Board",
    description="Attendance board for recurring group meetups: propose dates, collect answers, confirm at quorum",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(profile.router, prefix="/api/profile", tags=["Profile"])
app.include_router(rooms.router, prefix="/api/rooms", tags=["Rooms"])
app.include_router(candidates.router, prefix="/api", tags=["Candidates"])
app.include_router(guests.router, prefix="/api", tags=["Guests"])
app.include_router(events.router, prefix="/api", tags=["Events"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
