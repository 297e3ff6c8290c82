"""Service-Schicht: GroupService, Repositories und Ergebnistypen."""

from .group_service import GroupService
from .repository import GroupRepository, InMemoryGroupRepository, JsonGroupRepository
from .results import ConstraintViolation, Err, NotFound, Ok, Result, ResultError

__all__ = [
    "GroupService",
    "GroupRepository",
    "InMemoryGroupRepository",
    "JsonGroupRepository",
    "ConstraintViolation",
    "Err",
    "NotFound",
    "Ok",
    "Result",
    "ResultError",
]
