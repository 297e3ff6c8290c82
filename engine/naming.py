"""Ableitung des Gruppennamens aus den Wochenterminen.

Beispiele:
  1 Termin:   "Sun [ 9:00 AM - 11:00 AM ]"
  2 Termine:  "Sun [ 9:00 AM - 11:00 AM ] ~ Tue [ 2:00 PM - 4:00 PM ]"
  >2 Termine: "Multiple (3 Sessions)"
"""

from config.defaults import DAY_ABBREVIATIONS, DAY_ORDER, UNKNOWN_DAY_ORDER
from engine.time_helper import format_time_12h
from models.session import Session

FALLBACK_GROUP_NAME = "New Group"


def abbreviate_day(day: str) -> str:
    return DAY_ABBREVIATIONS.get(day, day[:3])


def sort_sessions_by_day(sessions: list[Session]) -> list[Session]:
    """Stabil nach Wochentag sortieren (So < Mo < Di < Mi < Do, Rest ans Ende)."""
    return sorted(sessions, key=lambda s: DAY_ORDER.get(s.day.value, UNKNOWN_DAY_ORDER))


def format_session_label(session: Session) -> str:
    return (
        f"{abbreviate_day(session.day.value)} "
        f"[ {format_time_12h(session.start_time)} - {format_time_12h(session.end_time)} ]"
    )


def generate_group_name(
    sessions: list[Session], fallback: str = FALLBACK_GROUP_NAME
) -> str:
    """Reine Funktion der Terminmenge; gleiche Termine → identischer Name."""
    if not sessions:
        return fallback

    ordered = sort_sessions_by_day(sessions)
    if len(ordered) <= 2:
        return " ~ ".join(format_session_label(s) for s in ordered)
    return f"Multiple ({len(ordered)} Sessions)"
