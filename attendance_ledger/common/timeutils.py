"""Local calendar-day helpers.

Instants are stored in UTC. A calendar day is the local midnight-to-midnight
window in ``settings.LOCAL_TIMEZONE``. SQLite drops tzinfo on round-trip, so
naive datetimes read back from storage are treated as UTC.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Optional

from attendance_ledger.config import settings


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    """Normalise a stored or supplied instant to an aware UTC datetime."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def to_local(ts: datetime, tz: Optional[tzinfo] = None) -> datetime:
    return as_utc(ts).astimezone(tz or settings.local_tz)


def local_day(ts: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day containing *ts* in the local timezone."""
    return to_local(ts, tz).date()


def local_today(tz: Optional[tzinfo] = None) -> date:
    return local_day(utc_now(), tz)

