"""Start- und Enddatum einer Gruppe als Hülle ihrer Terminzeiten."""

from datetime import datetime
from typing import Optional

from models.session import Session


def start_date(sessions: list[Session], now: Optional[datetime] = None) -> datetime:
    """Früheste Beginnzeit aller Termine, verankert am Datum von `now`.

    Ohne Termine gibt es keine echte Zeitspanne; dann wird `now` zurückgegeben.
    """
    now = now or datetime.now()
    if not sessions:
        return now
    earliest = min(s.start_time for s in sessions)
    return datetime.combine(now.date(), earliest)


def end_date(sessions: list[Session], now: Optional[datetime] = None) -> datetime:
    """Späteste Endzeit aller Termine (Platzhalter `now` ohne Termine)."""
    now = now or datetime.now()
    if not sessions:
        return now
    latest = max(s.end_time for s in sessions)
    return datetime.combine(now.date(), latest)


def date_envelope(
    sessions: list[Session], now: Optional[datetime] = None
) -> tuple[datetime, datetime]:
    now = now or datetime.now()
    return start_date(sessions, now), end_date(sessions, now)
