"""Engine-Modul: Terminprüfung, Namens-/Datumsableitung, Preise, Lektions-Zuordnung."""

from .session_validator import SessionValidator, SessionValidationResult
from .naming import generate_group_name
from .dates import start_date, end_date, date_envelope
from .pricing import PricingEngine, calculate_total_price
from .assignments import LectureAssignmentTracker

__all__ = [
    "SessionValidator",
    "SessionValidationResult",
    "generate_group_name",
    "start_date",
    "end_date",
    "date_envelope",
    "PricingEngine",
    "calculate_total_price",
    "LectureAssignmentTracker",
]
