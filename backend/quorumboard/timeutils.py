"""Timezone helpers — all stored timestamps are UTC, display uses settings.TIMEZONE."""
from datetime import date, datetime, time, timezone

import pytz

from quorumboard.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_tz():
    return pytz.timezone(settings.TIMEZONE)


def local_today() -> date:
    return utcnow().astimezone(local_tz()).date()


def parse_hhmm(value: str) -> time:
    """Parse ``HH:MM`` into a time; raises ValueError on anything else."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def combine_local(day: date, at: time) -> datetime:
    """Local wall-clock ``day`` + ``at`` converted to UTC."""
    local = local_tz().localize(datetime.combine(day, at))
    return local.astimezone(timezone.utc)


def format_local_hhmm(value: datetime) -> str:
    return as_utc(value).astimezone(local_tz()).strftime("%H:%M")
