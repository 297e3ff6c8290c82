"""Gruppen-Engine: Haupt-CLI.

Verwendung:
  python main.py config init                     Default-Konfiguration anlegen
  python main.py config show                     Konfiguration anzeigen
  python main.py generate                        Demo-Gruppen erzeugen
  python main.py list                            Gruppen auflisten (Filter + Seiten)
  python main.py show <gruppe>                   Gruppe im Detail anzeigen
  python main.py check-session <gruppe> ...      Termin gegen eine Gruppe prüfen
  python main.py add-session <gruppe> ...        Termin hinzufügen
  python main.py add-subscription <gruppe> ...   Abonnement hinzufügen
  python main.py assign <gruppe> <nr> <lehrer>   Lehrkraft einer Lektion zuordnen
  python main.py price ...                       Preis aus Abonnements berechnen
  python main.py times                           Uhrzeit-Auswahl anzeigen
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_service(data_path: Optional[str] = None):
    """Lädt Config (oder Defaults) und öffnet den JSON-Speicher."""
    from config.manager import ConfigManager
    from services.group_service import GroupService
    from services.repository import JsonGroupRepository

    config = ConfigManager().load_or_default()
    path = Path(data_path or config.storage.data_path)
    return GroupService(JsonGroupRepository(path), config)


def _unwrap_or_abort(result):
    """Gibt den Wert eines Ok zurück oder beendet mit Fehlermeldung."""
    if result.is_ok:
        return result.value
    error = result.error
    console.print(f"[red bold]Fehler:[/red bold] {error.message}")
    for detail in getattr(error, "details", []):
        console.print(f"  [red]• {detail}[/red]")
    sys.exit(1)


def _parse_time(value: str):
    from datetime import datetime
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        raise click.BadParameter(f"Uhrzeit '{value}' nicht im Format HH:MM")


_data_option = click.option(
    "--data", "data_path", default=None,
    help="Pfad zum JSON-Speicher (Standard: storage.data_path aus der Config).",
)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anlegen oder anzeigen."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
def config_init(force: bool):
    """Legt die Default-Konfiguration als YAML an."""
    from config.manager import ConfigManager
    from config.defaults import default_engine_config

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    mgr.save(default_engine_config())


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py config init[/bold] aus."
        )
        sys.exit(1)
    mgr.print_config(mgr.load())


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--count", default=12, help="Anzahl Gruppen.")
@_data_option
def cmd_generate(seed: int, count: int, data_path: Optional[str]):
    """Erzeugt Demo-Gruppen und speichert sie im JSON-Speicher."""
    from data.demo_data import DemoDataGenerator

    service = _load_service(data_path)
    console.print("[bold]Demo-Gruppen werden generiert...[/bold]")
    gen = DemoDataGenerator(service.config, seed=seed)
    groups = gen.populate(service, count=count)
    gen.print_summary(groups)
    console.print(f"[green]✓[/green] Gespeichert: {service.repository.path}")


# ─── LIST ─────────────────────────────────────────────────────────────────────

@click.command("list")
@click.option("--search", default="", help="Suchtext im Gruppennamen.")
@click.option("--status", multiple=True,
              type=click.Choice(["active", "completed", "canceled"]))
@click.option("--teacher", multiple=True, help="Lehrer-ID (mehrfach möglich).")
@click.option("--course", multiple=True, help="Kurs-ID (mehrfach möglich).")
@click.option("--location", multiple=True, help="Standort-ID (mehrfach möglich).")
@click.option("--subscription-type", multiple=True,
              type=click.Choice(["monthly", "level"]))
@click.option("--page", default=1, help="Seite (1-basiert).")
@_data_option
def cmd_list(search, status, teacher, course, location, subscription_type,
             page: int, data_path: Optional[str]):
    """Listet Gruppen gefiltert und seitenweise auf."""
    from models.group import GroupFilters
    from export.tui_renderer import GROUP_COLUMNS, render_group_rows

    service = _load_service(data_path)
    filters = GroupFilters(
        search_query=search,
        status=list(status),
        teachers=list(teacher),
        courses=list(course),
        locations=list(location),
        subscription_types=list(subscription_type),
    )
    groups = service.filter_groups(filters)
    pages = service.total_pages(len(groups))

    table = Table(title=f"Gruppen (Seite {page}/{max(pages, 1)})", box=box.ROUNDED)
    for col in GROUP_COLUMNS:
        table.add_column(col)
    for row in render_group_rows(service.paginate(groups, page)):
        table.add_row(*row)
    console.print(table)
    console.print(f"[dim]{len(groups)} Gruppe(n) gefunden.[/dim]")


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.argument("group_id")
@_data_option
def cmd_show(group_id: str, data_path: Optional[str]):
    """Zeigt Termine, Abonnements und Lektions-Zuordnungen einer Gruppe."""
    from export.tui_renderer import (
        render_assignment_rows, render_group_header,
        render_session_rows, render_subscription_rows,
    )

    service = _load_service(data_path)
    group = _unwrap_or_abort(service.get_group(group_id))

    console.print(Panel(render_group_header(group), title=group.id, border_style="cyan"))

    sessions = Table(title="Termine", box=box.ROUNDED)
    for col in ("ID", "Termin", "Dauer"):
        sessions.add_column(col)
    for row in render_session_rows(group):
        sessions.add_row(*row)
    console.print(sessions)

    subs = Table(title=f"Abonnements (Gesamt: {group.price})", box=box.ROUNDED)
    for col in ("ID", "Typ", "Betrag", "Lektionen", "Anteil"):
        subs.add_column(col)
    for row in render_subscription_rows(group, service.pricing):
        subs.add_row(*row)
    console.print(subs)

    lectures = Table(title="Lektionen", box=box.SIMPLE)
    for col in ("Nr.", "Lehrkraft", "Status", "Notiz"):
        lectures.add_column(col)
    for row in render_assignment_rows(group):
        lectures.add_row(*row)
    console.print(lectures)


# ─── TERMINE ──────────────────────────────────────────────────────────────────

_day_choice = click.Choice(
    ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
)


@click.command("check-session")
@click.argument("group_id")
@click.option("--day", required=True, type=_day_choice)
@click.option("--start", required=True, help="Beginn HH:MM")
@click.option("--end", required=True, help="Ende HH:MM")
@click.option("--exclude", default=None, help="Termin-ID, die beim Tageskonflikt ignoriert wird.")
@_data_option
def cmd_check_session(group_id, day, start, end, exclude, data_path):
    """Prüft einen Termin gegen die Regeln und die Termine der Gruppe."""
    service = _load_service(data_path)
    candidate = {"day": day, "start_time": _parse_time(start), "end_time": _parse_time(end)}
    report = _unwrap_or_abort(service.check_session(group_id, candidate, exclude))
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


@click.command("add-session")
@click.argument("group_id")
@click.option("--day", required=True, type=_day_choice)
@click.option("--start", required=True, help="Beginn HH:MM")
@click.option("--end", required=True, help="Ende HH:MM")
@_data_option
def cmd_add_session(group_id, day, start, end, data_path):
    """Fügt einen Termin hinzu; Name und Zeitraum werden neu abgeleitet."""
    service = _load_service(data_path)
    session = {"day": day, "start_time": _parse_time(start), "end_time": _parse_time(end)}
    group = _unwrap_or_abort(service.add_session(group_id, session))
    console.print(f"[green]✓[/green] Termin hinzugefügt. Neuer Name: [bold]{group.name}[/bold]")


# ─── ABONNEMENTS ──────────────────────────────────────────────────────────────

@click.command("add-subscription")
@click.argument("group_id")
@click.option("--type", "sub_type", required=True, type=click.Choice(["monthly", "level"]))
@click.option("--amount", required=True, type=float)
@click.option("--currency", default="egp", type=click.Choice(["egp", "usd"]))
@click.option("--lectures", required=True, type=int, help="Enthaltene Lektionen.")
@_data_option
def cmd_add_subscription(group_id, sub_type, amount, currency, lectures, data_path):
    """Fügt ein Abonnement hinzu (pro Typ höchstens eines)."""
    service = _load_service(data_path)
    group = _unwrap_or_abort(service.add_subscription(group_id, {
        "type": sub_type,
        "cost": {"amount": amount, "currency": currency},
        "number_of_lectures_included": lectures,
    }))
    console.print(f"[green]✓[/green] Abonnement hinzugefügt. Gesamtpreis: [bold]{group.price}[/bold]")


# ─── ZUORDNUNG ────────────────────────────────────────────────────────────────

@click.command("assign")
@click.argument("group_id")
@click.argument("lecture_number", type=int)
@click.argument("teacher_id")
@click.option("--status", default=None,
              type=click.Choice(["scheduled", "completed", "current", "next", "upcoming", "dismissed"]))
@click.option("--notes", default=None)
@_data_option
def cmd_assign(group_id, lecture_number, teacher_id, status, notes, data_path):
    """Ordnet einer Lektion eine Lehrkraft (und optional Status/Notiz) zu."""
    from models.lecture_assignment import LectureStatus

    service = _load_service(data_path)
    _unwrap_or_abort(service.update_teacher_assignment(
        group_id, lecture_number, teacher_id,
        LectureStatus(status) if status else None, notes,
    ))
    console.print(f"[green]✓[/green] Lektion {lecture_number} → {teacher_id}")


# ─── PRICE ────────────────────────────────────────────────────────────────────

@click.command("price")
@click.option("--monthly", default=None, help="Monatsabo als BETRAG:LEKTIONEN, z.B. 800:8")
@click.option("--level", default=None, type=float, help="Level-Pauschale")
@click.option("--currency", default="egp", type=click.Choice(["egp", "usd"]))
def cmd_price(monthly: Optional[str], level: Optional[float], currency: str):
    """Berechnet einen Gesamtpreis ohne Gruppe (Schnellrechner)."""
    from pydantic import ValidationError

    from config.manager import ConfigManager
    from engine.pricing import PricingEngine
    from models.subscription import Subscription
    from services.group_service import _format_validation_errors

    raw = []
    if monthly:
        try:
            amount, lectures = monthly.split(":")
            raw.append({
                "type": "monthly",
                "cost": {"amount": float(amount), "currency": currency},
                "number_of_lectures_included": int(lectures),
            })
        except ValueError:
            raise click.BadParameter("--monthly erwartet BETRAG:LEKTIONEN")
    if level is not None:
        raw.append({
            "type": "level",
            "cost": {"amount": level, "currency": currency},
            "number_of_lectures_included": 1,
        })

    try:
        subs = [Subscription.model_validate(r) for r in raw]
    except ValidationError as exc:
        console.print("[red bold]Fehler:[/red bold] Ungültiges Abonnement")
        for detail in _format_validation_errors(exc):
            console.print(f"  [red]• {detail}[/red]")
        sys.exit(1)

    config = ConfigManager().load_or_default()
    total = PricingEngine(config.pricing).calculate_total_price(subs)
    console.print(f"Gesamtpreis: [bold]{total}[/bold]")


@click.command("times")
def cmd_times():
    """Listet die wählbaren Uhrzeiten im konfigurierten Raster."""
    from config.manager import ConfigManager
    from engine.time_helper import generate_time_options

    config = ConfigManager().load_or_default()
    options = generate_time_options(config.scheduling.time_option_interval)
    console.print(", ".join(f"{o.value} ({o.label})" for o in options))


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Logging aktivieren.")
def cli(verbose: bool):
    """Gruppen-Engine: Termine, Gruppennamen, Preise und Lektions-Zuordnung.

    Starten Sie mit: python main.py config init
    """
    _setup_logging(verbose)


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_list)
cli.add_command(cmd_show)
cli.add_command(cmd_check_session)
cli.add_command(cmd_add_session)
cli.add_command(cmd_add_subscription)
cli.add_command(cmd_assign)
cli.add_command(cmd_price)
cli.add_command(cmd_times)


if __name__ == "__main__":
    main()
