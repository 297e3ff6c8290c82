"""Validierung wiederkehrender Termine vor dem Speichern.

Alle Prüfungen laufen immer vollständig durch, damit der Aufrufer jede
Verletzung gleichzeitig anzeigen kann. Fehler werden als Liste gemeldet und
nie geworfen; ob gespeichert wird, entscheidet der Aufrufer.
"""

from datetime import time
from typing import Iterable, Optional

from pydantic import BaseModel

from config.schema import SchedulingConfig, Weekday
from engine.time_helper import minutes_between, to_minutes
from models.session import Session


class SessionValidationResult(BaseModel):
    """Ergebnis der Termin-Validierung."""

    is_valid: bool
    errors: list[str]

    def print_rich(self) -> None:
        """Gibt das Ergebnis formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_valid:
            lines = ["[bold green]✓ GÜLTIG[/bold green]"]
        else:
            lines = ["[bold red]✗ UNGÜLTIG[/bold red]"]
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        console.print(Panel("\n".join(lines), title="Termin-Prüfung", border_style="cyan"))


class SessionValidator:
    """Prüft einen Termin gegen Wochentags-Whitelist, Dauer, Reihenfolge und
    bestehende Termine derselben Gruppe."""

    def __init__(self, config: Optional[SchedulingConfig] = None) -> None:
        self.config = config or SchedulingConfig()

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def is_valid_day(self, day: Weekday) -> bool:
        return day in self.config.allowed_days

    def is_valid_time_order(self, start_time: time, end_time: time) -> bool:
        return to_minutes(start_time) < to_minutes(end_time)

    def is_valid_duration(self, start_time: time, end_time: time) -> bool:
        return minutes_between(start_time, end_time) >= self.config.min_session_minutes

    def has_conflict(
        self,
        candidate: Session,
        existing_sessions: Iterable[Session],
        exclude_session_id: Optional[str] = None,
    ) -> bool:
        """Gleicher Wochentag = Konflikt, unabhängig von Überschneidung der Zeiten."""
        for session in existing_sessions:
            if exclude_session_id and session.id == exclude_session_id:
                continue
            if session.day == candidate.day:
                return True
        return False

    # ── Gesamtprüfung ─────────────────────────────────────────────────────────

    def validate_session(
        self,
        candidate: Session,
        existing_sessions: Iterable[Session] = (),
        exclude_session_id: Optional[str] = None,
    ) -> SessionValidationResult:
        errors: list[str] = []

        if not self.is_valid_day(candidate.day):
            errors.append(self._day_message())

        if not self.is_valid_time_order(candidate.start_time, candidate.end_time):
            errors.append("Start time must be before end time")

        if not self.is_valid_duration(candidate.start_time, candidate.end_time):
            errors.append(self._duration_message())

        if self.has_conflict(candidate, existing_sessions, exclude_session_id):
            errors.append(f"A session already exists for {candidate.day.value}")

        return SessionValidationResult(is_valid=not errors, errors=errors)

    def validate_session_set(self, sessions: list[Session]) -> SessionValidationResult:
        """Prüft jeden Termin gegen alle anderen der Menge.

        Wird genutzt, wenn die Termine einer Gruppe komplett ersetzt werden.
        Meldungen tragen den Wochentag des betroffenen Termins als Präfix.
        """
        errors: list[str] = []
        for idx, session in enumerate(sessions):
            # Nur frühere Termine vergleichen, sonst wird jeder Konflikt doppelt gemeldet
            result = self.validate_session(session, sessions[:idx])
            errors.extend(f"{session.day.value}: {e}" for e in result.errors)
        return SessionValidationResult(is_valid=not errors, errors=errors)

    # ── Meldungen ─────────────────────────────────────────────────────────────

    def _day_message(self) -> str:
        days = self.config.allowed_days
        if len(days) > 1 and _is_contiguous(days):
            return (
                f"Sessions can only be scheduled on {days[0].value} "
                f"through {days[-1].value}"
            )
        return "Sessions can only be scheduled on " + ", ".join(d.value for d in days)

    def _duration_message(self) -> str:
        minutes = self.config.min_session_minutes
        if minutes % 60 == 0:
            hours = minutes // 60
            unit = "hour" if hours == 1 else "hours"
            return f"Session must be at least {hours} {unit} long"
        return f"Session must be at least {minutes} minutes long"


def _is_contiguous(days: list[Weekday]) -> bool:
    order = list(Weekday)
    idx = [order.index(d) for d in days]
    return idx == list(range(idx[0], idx[0] + len(idx)))
