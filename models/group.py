"""Group: Aggregat aus Terminen, Abonnements und Lektions-Zuordnungen (Pydantic v2)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.session import Session
from models.subscription import Cost, Subscription, SubscriptionType
from models.lecture_assignment import LectureAssignment


class GroupStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELED = "canceled"


class GroupDraft(BaseModel):
    """Eingabe für das Anlegen einer Gruppe.

    Enthält nur Quellfelder; id, Name, Start/Ende, Preis und Zeitstempel
    werden beim Anlegen abgeleitet.
    """

    sessions: list[Session] = []
    teachers: list[str] = []           # Lehrer-IDs
    courses: list[str] = []            # Kurs-IDs
    capacity_limit: int = Field(20, ge=1)
    current_enrollment: int = Field(0, ge=0)
    location: str = ""                 # Standort-ID
    status: GroupStatus = GroupStatus.ACTIVE
    total_lectures: int = Field(0, ge=0)
    current_lecture_number: int = Field(0, ge=0)
    upcoming_lecture_number: int = Field(0, ge=0)
    teacher_assignments: list[LectureAssignment] = []
    subscriptions: list[Subscription] = []


# Felder, die nur die Engine setzen darf
DERIVED_FIELDS = frozenset({"name", "start_date", "end_date", "price"})
IDENTITY_FIELDS = frozenset({"id", "created_at", "updated_at", "version"})


class Group(GroupDraft):
    """Vollständiger Gruppen-Snapshot inkl. abgeleiteter Felder.

    Unveränderlich: jede Mutation erzeugt über den GroupService einen neuen
    Snapshot, in dem name, start_date/end_date und price zu den
    Quellfeldern passen.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    start_date: datetime
    end_date: datetime
    price: Cost
    created_at: datetime
    updated_at: datetime
    version: int = 1

    @model_validator(mode='after')
    def _check_unique_keys(self):
        days = [s.day for s in self.sessions]
        if len(days) != len(set(days)):
            raise ValueError(f"Gruppe {self.id}: mehrere Termine am selben Tag")
        types = [s.type for s in self.subscriptions]
        if len(types) != len(set(types)):
            raise ValueError(f"Gruppe {self.id}: Abonnement-Typ doppelt vorhanden")
        return self

    def subscription_of_type(self, sub_type: SubscriptionType) -> Optional[Subscription]:
        return next((s for s in self.subscriptions if s.type == sub_type), None)


class GroupFilters(BaseModel):
    """Filterkriterien für Gruppenlisten. Leere Listen = kein Filter."""

    search_query: str = ""
    status: list[GroupStatus] = []
    teachers: list[str] = []
    courses: list[str] = []
    locations: list[str] = []
    subscription_types: list[SubscriptionType] = []
    date_range: tuple[Optional[datetime], Optional[datetime]] = (None, None)
    # None = offene Grenze
    capacity_range: tuple[Optional[int], Optional[int]] = (None, None)
    lecture_range: tuple[Optional[int], Optional[int]] = (None, None)

    def matches(self, group: Group) -> bool:
        """True, wenn die Gruppe alle gesetzten Kriterien erfüllt."""
        if self.search_query and self.search_query.lower() not in group.name.lower():
            return False
        if self.status and group.status not in self.status:
            return False
        if self.teachers and not any(t in group.teachers for t in self.teachers):
            return False
        if self.courses and not any(c in group.courses for c in self.courses):
            return False
        if self.locations and group.location not in self.locations:
            return False
        if self.subscription_types and not any(
            s.type in self.subscription_types for s in group.subscriptions
        ):
            return False

        return (
            _in_range(group.created_at, self.date_range)
            and _in_range(group.capacity_limit, self.capacity_range)
            and _in_range(group.total_lectures, self.lecture_range)
        )


def _in_range(value, bounds: tuple) -> bool:
    low, high = bounds
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True
