"""Hilfsfunktionen für Uhrzeiten von Terminen: Erzeugen, Auslesen, Formatieren."""

from datetime import datetime, time

from pydantic import BaseModel

from models.session import Session


class TimeOption(BaseModel):
    """Ein Eintrag der Uhrzeit-Auswahl (z.B. für Dropdowns)."""

    value: str      # "14:30"
    label: str      # "2:30 PM"
    hours: int
    minutes: int


# ─── Erzeugen / Auslesen ──────────────────────────────────────────────────────

def create_time(hours: int, minutes: int) -> time:
    """Uhrzeit aus Stunde und Minute. Ungültige Werte → ValueError."""
    if not 0 <= hours <= 23:
        raise ValueError(f"Stunde {hours} außerhalb 0–23")
    if not 0 <= minutes <= 59:
        raise ValueError(f"Minute {minutes} außerhalb 0–59")
    return time(hours, minutes)


def get_time_components(value: time) -> tuple[int, int]:
    """Gibt (Stunde, Minute) zurück, z.B. für Formularfelder."""
    return value.hour, value.minute


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_between(start: time, end: time) -> int:
    """Differenz end − start in Minuten, nur auf Uhrzeit-Ebene."""
    return to_minutes(end) - to_minutes(start)


# ─── Formatieren ──────────────────────────────────────────────────────────────

def format_time_12h(value: time) -> str:
    """12-Stunden-Format ohne führende Null: 9:00 AM, 2:00 PM, 12:15 AM."""
    suffix = "PM" if value.hour >= 12 else "AM"
    display_hour = value.hour % 12 or 12
    return f"{display_hour}:{value.minute:02d} {suffix}"


def format_time_24h(value: time) -> str:
    """24-Stunden-Format mit führender Null: 09:00."""
    return f"{value.hour:02d}:{value.minute:02d}"


def format_session_time(session: Session) -> str:
    """Anzeige eines Termins: 'Sunday - 09:00 → 11:00'."""
    return (
        f"{session.day.value} - {format_time_24h(session.start_time)} → "
        f"{format_time_24h(session.end_time)}"
    )


def format_date_with_day(value: datetime) -> str:
    """'Sun 10/18/2026, 09:00 AM'."""
    return f"{value.strftime('%a')} {value.strftime('%m/%d/%Y, %I:%M %p')}"


def format_date_range(start: datetime, end: datetime) -> str:
    return f"{format_date_with_day(start)}, {format_date_with_day(end)}"


# ─── Uhrzeit-Auswahl ──────────────────────────────────────────────────────────

def generate_time_options(interval_minutes: int = 15) -> list[TimeOption]:
    """Alle Uhrzeiten eines Tages im gegebenen Raster (Standard: 15 Minuten).

    Das Raster muss 60 teilen, sonst wäre die Auswahl pro Stunde ungleichmäßig.
    """
    if interval_minutes <= 0 or 60 % interval_minutes != 0:
        raise ValueError(f"Raster {interval_minutes} teilt 60 nicht")

    options: list[TimeOption] = []
    for hour in range(24):
        for minute in range(0, 60, interval_minutes):
            t = time(hour, minute)
            options.append(TimeOption(
                value=format_time_24h(t),
                label=format_time_12h(t),
                hours=hour,
                minutes=minute,
            ))
    return options
