"""Ergebnistypen für Gruppen-Mutationen: Ok(Group) | Err(ConstraintViolation | NotFound).

Fehler werden zurückgegeben statt geworfen; der Aufrufer muss sie prüfen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ResultError(Exception):
    """unwrap() auf einem Err-Ergebnis."""


@dataclass(frozen=True)
class ConstraintViolation:
    """Eine Domänenregel wurde verletzt (z.B. doppelter Abonnement-Typ)."""

    message: str
    details: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}: " + "; ".join(self.details)


@dataclass(frozen=True)
class NotFound:
    """Gruppe, Termin oder Abonnement mit dieser ID existiert nicht."""

    entity: str    # "group" / "session" / "subscription"
    entity_id: str

    @property
    def message(self) -> str:
        return f"{self.entity} with id {self.entity_id} not found"

    def __str__(self) -> str:
        return self.message


DomainError = Union[ConstraintViolation, NotFound]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: DomainError

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    def unwrap(self):
        raise ResultError(str(self.error))


Result = Union[Ok[T], Err]
