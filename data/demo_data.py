"""Demo-Daten-Generator für die Gruppen-Engine.

Erzeugt realistische Gruppen über den GroupService, damit alle abgeleiteten
Felder (Name, Start/Ende, Preis) exakt so entstehen wie im Betrieb.

Absichtlich enthaltene Sonderfälle:
  1. Gruppe ohne Termine → Name "New Group", Start/Ende = Erzeugungszeitpunkt
  2. Gruppe mit drei Terminen → Name "Multiple (3 Sessions)"
  3. Abgesagte Gruppe: offene Lektionen stehen auf 'dismissed'
  4. Gruppe mit Monats- UND Level-Abonnement (beide Typen, je einmal)
"""

import logging
import random
from datetime import time
from typing import Optional

from config.defaults import DEMO_COURSES, DEMO_LOCATIONS, DEMO_TEACHERS
from config.schema import Currency, EngineConfig
from models.group import Group, GroupDraft, GroupStatus
from models.lecture_assignment import LectureAssignment, LectureStatus
from models.session import Session
from models.subscription import Cost, Subscription, SubscriptionType
from services.group_service import GroupService

logger = logging.getLogger(__name__)

# Monatsbeträge und Level-Pauschalen je Währung
_MONTHLY_AMOUNTS = {Currency.EGP: [600, 800, 950, 1200], Currency.USD: [40, 60, 75]}
_LEVEL_AMOUNTS = {Currency.EGP: [2500, 3200, 4000], Currency.USD: [180, 250, 300]}
_LECTURE_COUNTS = [8, 12, 16, 24]
_DURATIONS = [60, 90, 120]


def lecture_status_for(lecture_number: int, current: int) -> LectureStatus:
    """Status einer Lektion relativ zur aktuellen Lektionsnummer."""
    if current <= 0:
        return LectureStatus.SCHEDULED
    if lecture_number < current:
        return LectureStatus.COMPLETED
    if lecture_number == current:
        return LectureStatus.CURRENT
    if lecture_number == current + 1:
        return LectureStatus.NEXT
    return LectureStatus.UPCOMING


class DemoDataGenerator:
    """Generiert Demo-Gruppen auf Basis der EngineConfig."""

    def __init__(self, config: EngineConfig, seed: Optional[int] = None) -> None:
        self.config = config
        self.rng = random.Random(seed)

    # ─── Bausteine ────────────────────────────────────────────────────────────

    def _make_sessions(self, count: int) -> list[Session]:
        allowed = self.config.scheduling.allowed_days
        days = self.rng.sample(allowed, k=min(count, len(allowed)))
        sessions = []
        for day in days:
            start_hour = self.rng.randint(8, 18)
            start_minute = self.rng.choice([0, 15, 30, 45])
            duration = self.rng.choice(_DURATIONS)
            end_total = min(start_hour * 60 + start_minute + duration, 23 * 60 + 45)
            sessions.append(Session(
                day=day,
                start_time=time(start_hour, start_minute),
                end_time=time(end_total // 60, end_total % 60),
            ))
        return sessions

    def _make_subscriptions(self, currency: Currency, both: bool) -> list[Subscription]:
        types = [SubscriptionType.MONTHLY, SubscriptionType.LEVEL]
        if not both:
            types = [self.rng.choice(types)]
        subs = []
        for sub_type in types:
            amounts = _MONTHLY_AMOUNTS if sub_type == SubscriptionType.MONTHLY else _LEVEL_AMOUNTS
            subs.append(Subscription(
                type=sub_type,
                cost=Cost(amount=self.rng.choice(amounts[currency]), currency=currency),
                number_of_lectures_included=self.rng.choice(_LECTURE_COUNTS),
            ))
        return subs

    def _make_assignments(
        self, teachers: list[str], total: int, current: int, group_status: GroupStatus
    ) -> list[LectureAssignment]:
        assignments = []
        for n in range(1, total + 1):
            status = lecture_status_for(n, current)
            if group_status == GroupStatus.COMPLETED:
                status = LectureStatus.COMPLETED
            elif group_status == GroupStatus.CANCELED and n >= current:
                status = LectureStatus.DISMISSED
            assignments.append(LectureAssignment(
                lecture_number=n,
                teacher_id=teachers[(n - 1) % len(teachers)],
                status=status,
                notes="Group canceled" if status == LectureStatus.DISMISSED else None,
            ))
        return assignments

    def _make_draft(
        self,
        session_count: int,
        status: GroupStatus = GroupStatus.ACTIVE,
        both_subscriptions: bool = False,
    ) -> GroupDraft:
        teachers = self.rng.sample(sorted(DEMO_TEACHERS), k=self.rng.randint(1, 2))
        total = self.rng.choice(_LECTURE_COUNTS)
        current = self.rng.randint(1, total) if status != GroupStatus.COMPLETED else total
        capacity = self.rng.choice([10, 15, 20, 25])
        currency = self.rng.choice(list(Currency))
        return GroupDraft(
            sessions=self._make_sessions(session_count),
            teachers=teachers,
            courses=self.rng.sample(sorted(DEMO_COURSES), k=self.rng.randint(1, 2)),
            capacity_limit=capacity,
            current_enrollment=self.rng.randint(0, capacity),
            location=self.rng.choice(sorted(DEMO_LOCATIONS)),
            status=status,
            total_lectures=total,
            current_lecture_number=current,
            upcoming_lecture_number=min(current + 1, total),
            teacher_assignments=self._make_assignments(
                teachers, total, current, status
            ),
            subscriptions=self._make_subscriptions(currency, both_subscriptions),
        )

    # ─── Gesamtdatensatz ──────────────────────────────────────────────────────

    def drafts(self, count: int = 12) -> list[GroupDraft]:
        """Erzeugt `count` Entwürfe inkl. der Sonderfälle aus dem Modul-Docstring."""
        drafts = [
            self._make_draft(0),
            self._make_draft(3),
            self._make_draft(2, status=GroupStatus.CANCELED),
            self._make_draft(2, both_subscriptions=True),
        ]
        while len(drafts) < count:
            drafts.append(self._make_draft(
                self.rng.choice([1, 2, 2, 3]),
                status=self.rng.choice([GroupStatus.ACTIVE] * 4 + [GroupStatus.COMPLETED]),
                both_subscriptions=self.rng.random() < 0.3,
            ))
        return drafts[:count]

    def populate(self, service: GroupService, count: int = 12) -> list[Group]:
        """Legt die Entwürfe über den Service an und gibt die Gruppen zurück."""
        groups = []
        for draft in self.drafts(count):
            result = service.add_group(draft)
            if not result.is_ok:
                logger.warning(f"Demo-Gruppe verworfen: {result.error}")
                continue
            groups.append(result.value)
        return groups

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, groups: list[Group]) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Gruppen aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Gruppen", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        by_status = {s: sum(1 for g in groups if g.status == s) for s in GroupStatus}
        table.add_row("Gruppen", str(len(groups)),
                      ", ".join(f"{n} {s.value}" for s, n in by_status.items() if n))
        table.add_row("Termine", str(sum(len(g.sessions) for g in groups)), "")
        table.add_row("Abonnements", str(sum(len(g.subscriptions) for g in groups)), "")
        table.add_row("Lektionen", str(sum(g.total_lectures for g in groups)),
                      f"{sum(len(g.teacher_assignments) for g in groups)} zugeordnet")
        console.print(table)
