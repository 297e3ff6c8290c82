"""Datenmodell für Abonnements einer Gruppe (Pydantic v2)."""

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from config.schema import Currency


class SubscriptionType(str, Enum):
    MONTHLY = "monthly"
    LEVEL = "level"


class Cost(BaseModel):
    """Betrag + Währung."""

    model_config = ConfigDict(frozen=True)

    amount: float = Field(ge=0)
    currency: Currency

    def __str__(self) -> str:
        return f"{self.amount:,.2f} {self.currency.value.upper()}"


class Subscription(BaseModel):
    """Abrechnungsmodell einer Gruppe.

    monthly: Betrag pro Monat, Anzahl Monate ergibt sich aus den Lektionen.
    level:   Pauschalbetrag für das gesamte Level.
    Pro Gruppe höchstens ein Abonnement je Typ.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"sub_{uuid.uuid4().hex[:9]}")
    type: SubscriptionType
    cost: Cost
    number_of_lectures_included: int = Field(ge=1)
