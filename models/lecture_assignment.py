"""Lehrer-Zuordnung pro Lektion (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LectureStatus(str, Enum):
    """Lebenszyklus einer Lektion.

    Es gibt keinen erzwungenen Übergangsgraphen, jeder Status darf direkt
    gesetzt werden. Bedeutung: completed = vergangen, current = läuft gerade,
    next = direkt nach current, upcoming = spätere Lektionen,
    dismissed = findet nicht statt (z.B. Ausfall).
    """

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CURRENT = "current"
    NEXT = "next"
    UPCOMING = "upcoming"
    DISMISSED = "dismissed"


class LectureAssignment(BaseModel):
    """Welche Lehrkraft hält Lektion Nr. X, und in welchem Zustand ist sie."""

    model_config = ConfigDict(frozen=True)

    lecture_number: int = Field(ge=1)
    teacher_id: str
    status: LectureStatus = LectureStatus.SCHEDULED
    notes: Optional[str] = None


class AssignmentUpdate(BaseModel):
    """Teil-Update für die Sammelbearbeitung; nur gesetzte Felder zählen."""

    lecture_number: int = Field(ge=1)
    teacher_id: Optional[str] = None
    status: Optional[LectureStatus] = None
    notes: Optional[str] = None
