"""Datenmodell für einen wiederkehrenden Wochentermin (Pydantic v2)."""

import uuid
from datetime import datetime, time

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.schema import Weekday


def new_session_id() -> str:
    return f"session_{uuid.uuid4().hex[:9]}"


class Session(BaseModel):
    """Ein wöchentlicher Termin einer Gruppe (Tag + Uhrzeit von/bis).

    Nur Stunde und Minute sind relevant. Ein übergebener datetime-Wert wird
    auf seine Uhrzeit reduziert, das Datum ist bedeutungslos.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_session_id)
    day: Weekday
    start_time: time
    end_time: time

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _strip_date(cls, v):
        if isinstance(v, datetime):
            return v.time().replace(second=0, microsecond=0)
        return v

    @property
    def duration_minutes(self) -> int:
        """Dauer in Minuten (negativ, wenn Ende vor Beginn liegt)."""
        return (
            (self.end_time.hour * 60 + self.end_time.minute)
            - (self.start_time.hour * 60 + self.start_time.minute)
        )

    def __str__(self) -> str:
        return (
            f"{self.day.value} {self.start_time.strftime('%H:%M')}"
            f"–{self.end_time.strftime('%H:%M')}"
        )
