from config.schema import (
    ACADEMIC_WEEK,
    Currency,
    EngineConfig,
    ListingConfig,
    PricingConfig,
    SchedulingConfig,
    StorageConfig,
)


# Abkürzungen für Gruppennamen; unbekannte Tage → erste drei Buchstaben
DAY_ABBREVIATIONS: dict[str, str] = {
    "Sunday": "Sun",
    "Monday": "Mon",
    "Tuesday": "Tue",
    "Wednesday": "Wed",
    "Thursday": "Thu",
}

# Sortierreihenfolge der Wochentage; alles außerhalb sortiert ans Ende
DAY_ORDER: dict[str, int] = {day.value: idx for idx, day in enumerate(ACADEMIC_WEEK)}
UNKNOWN_DAY_ORDER = 999

# Demo-Katalog: Kurse, Lehrkräfte und Standorte (nur Kennungen)
DEMO_COURSES: dict[str, str] = {
    "course_en_a1": "English A1",
    "course_en_a2": "English A2",
    "course_de_a1": "German A1",
    "course_fr_a1": "French A1",
    "course_math_1": "Mathematics I",
    "course_prog_py": "Programming with Python",
}

DEMO_TEACHERS: dict[str, str] = {
    "teacher_1": "Sarah Johnson",
    "teacher_2": "Ahmed Hassan",
    "teacher_3": "Mona Adel",
    "teacher_4": "David Miller",
    "teacher_5": "Nour El-Din",
    "teacher_6": "Laila Mostafa",
}

DEMO_LOCATIONS: dict[str, str] = {
    "location_cairo": "Cairo Campus",
    "location_giza": "Giza Branch",
    "location_online": "Online Classroom",
}


def default_scheduling() -> SchedulingConfig:
    """Standard-Terminregeln: So–Do, mindestens 60 Minuten, 15-Minuten-Raster."""
    return SchedulingConfig(
        allowed_days=list(ACADEMIC_WEEK),
        min_session_minutes=60,
        time_option_interval=15,
        fallback_group_name="New Group",
    )


def default_pricing() -> PricingConfig:
    """Standard-Preisannahmen: EGP, 4 Lektionen pro Monat."""
    return PricingConfig(default_currency=Currency.EGP, lectures_per_month=4)


def default_engine_config() -> EngineConfig:
    """Vollständige Default-Konfiguration der Gruppen-Engine."""
    return EngineConfig(
        school_name="Muster-Akademie",
        scheduling=default_scheduling(),
        pricing=default_pricing(),
        listing=ListingConfig(items_per_page=12),
        storage=StorageConfig(data_path="output/groups.json"),
    )
