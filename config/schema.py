from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum


class Weekday(str, Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


class Currency(str, Enum):
    EGP = "egp"
    USD = "usd"


# Akademische Woche: Sonntag bis Donnerstag (Wochenende ausgeschlossen)
ACADEMIC_WEEK: list[Weekday] = [
    Weekday.SUNDAY,
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
]


# ─── TERMINPLANUNG ───

class SchedulingConfig(BaseModel):
    """Regeln für wiederkehrende Termine (Sessions) einer Gruppe."""
    # Wochentage, an denen Termine stattfinden dürfen
    allowed_days: list[Weekday] = Field(
        default_factory=lambda: list(ACADEMIC_WEEK),
        description="Erlaubte Wochentage für Termine")
    # Mindestdauer eines Termins in Minuten
    min_session_minutes: int = Field(60, ge=1, le=600,
        description="Mindestdauer eines Termins (Minuten)")
    # Raster der Uhrzeit-Auswahl in Minuten (muss 60 teilen)
    time_option_interval: int = Field(15, ge=1, le=60,
        description="Raster der Uhrzeit-Auswahl (Minuten)")
    # Name einer Gruppe ohne Termine
    fallback_group_name: str = Field("New Group",
        description="Gruppenname ohne Termine")

    @field_validator("allowed_days")
    @classmethod
    def _days_not_empty(cls, v: list[Weekday]) -> list[Weekday]:
        if not v:
            raise ValueError("allowed_days darf nicht leer sein")
        return v

    @model_validator(mode='after')
    def validate_interval(self):
        """Das Uhrzeit-Raster muss eine Stunde lückenlos aufteilen."""
        if 60 % self.time_option_interval != 0:
            raise ValueError(
                f"time_option_interval {self.time_option_interval} teilt 60 nicht")
        return self


# ─── PREISBERECHNUNG ───

class PricingConfig(BaseModel):
    """Annahmen der Preisberechnung aus Abonnements."""
    # Währung, wenn eine Gruppe kein Abonnement hat
    default_currency: Currency = Field(Currency.EGP,
        description="Standardwährung ohne Abonnement")
    # Annahme: so viele Lektionen pro abgerechnetem Monat
    lectures_per_month: int = Field(4, ge=1, le=31,
        description="Lektionen pro Abrechnungsmonat")


# ─── LISTEN / PAGINIERUNG ───

class ListingConfig(BaseModel):
    """Darstellung von Gruppenlisten."""
    # Gruppen pro Seite
    items_per_page: int = Field(12, ge=1, le=200,
        description="Gruppen pro Seite")


# ─── SPEICHER ───

class StorageConfig(BaseModel):
    """Ablage des Gruppen-Datensatzes."""
    # JSON-Datei mit allen Gruppen
    data_path: str = Field("output/groups.json",
        description="JSON-Datei mit allen Gruppen")


# ─── GESAMT-CONFIG ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration der Gruppen-Engine."""
    # Name der Einrichtung (nur Anzeige)
    school_name: str = Field("Muster-Akademie",
        description="Name der Einrichtung")
    # Terminregeln
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    # Preisberechnung
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    # Listen und Paginierung
    listing: ListingConfig = Field(default_factory=ListingConfig)
    # Datenablage
    storage: StorageConfig = Field(default_factory=StorageConfig)
