"""Gemeinsamer Renderer für die Terminal-Anzeige von Gruppen.

Liefert reine Tabellenzeilen (list[list[str]]); main.py baut daraus
Rich-Tabellen für `list` und `show`.
"""

from typing import TYPE_CHECKING

from engine.time_helper import format_date_range, format_session_time
from engine.naming import sort_sessions_by_day

if TYPE_CHECKING:
    from models.group import Group
    from engine.pricing import PricingEngine

# Farbe je Lektionsstatus (Rich-Markup)
STATUS_STYLES: dict[str, str] = {
    "completed": "dim",
    "current":   "bold green",
    "next":      "green",
    "upcoming":  "cyan",
    "scheduled": "white",
    "dismissed": "red",
}

GROUP_COLUMNS = ["ID", "Name", "Status", "Lektionen", "Belegung", "Preis"]


def render_group_rows(groups: list["Group"]) -> list[list[str]]:
    """Eine Zeile pro Gruppe: [id, name, status, lektionen, belegung, preis]."""
    rows: list[list[str]] = []
    for g in groups:
        rows.append([
            g.id,
            g.name,
            g.status.value,
            f"{g.current_lecture_number}/{g.total_lectures}",
            f"{g.current_enrollment}/{g.capacity_limit}",
            str(g.price),
        ])
    return rows


def render_session_rows(group: "Group") -> list[list[str]]:
    """Termine in Wochentagsreihenfolge: [id, anzeige, dauer]."""
    return [
        [s.id, format_session_time(s), f"{s.duration_minutes} min"]
        for s in sort_sessions_by_day(group.sessions)
    ]


def render_subscription_rows(
    group: "Group", pricing: "PricingEngine"
) -> list[list[str]]:
    """Abonnements inkl. Preisanteil: [id, typ, betrag, lektionen, anteil]."""
    rows: list[list[str]] = []
    for s in group.subscriptions:
        share = pricing.subscription_contribution(s)
        rows.append([
            s.id,
            s.type.value,
            str(s.cost),
            str(s.number_of_lectures_included),
            f"{share:,.2f} {s.cost.currency.value.upper()}",
        ])
    return rows


def render_assignment_rows(group: "Group") -> list[list[str]]:
    """Lektionen 1..total_lectures; fehlende Zuordnungen bleiben leer markiert."""
    by_number = {a.lecture_number: a for a in group.teacher_assignments}
    rows: list[list[str]] = []
    for n in range(1, group.total_lectures + 1):
        a = by_number.get(n)
        if a is None:
            rows.append([str(n), "—", "—", ""])
            continue
        style = STATUS_STYLES.get(a.status.value, "white")
        rows.append([
            str(n),
            a.teacher_id,
            f"[{style}]{a.status.value}[/{style}]",
            a.notes or "",
        ])
    return rows


def render_group_header(group: "Group") -> str:
    """Kopfzeile für `show`: Name, Zeitraum, Status."""
    return (
        f"[bold]{group.name}[/bold]  |  {group.status.value}  |  "
        f"{format_date_range(group.start_date, group.end_date)}"
    )
