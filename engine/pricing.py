"""Gesamtpreis einer Gruppe aus ihren Abonnements."""

import logging
import math
from typing import Optional

from config.schema import PricingConfig
from models.subscription import Cost, Subscription, SubscriptionType

logger = logging.getLogger(__name__)


class PricingEngine:
    """Berechnet Preise nach den Annahmen aus PricingConfig.

    monthly: Betrag × ceil(Lektionen / lectures_per_month)
    level:   Betrag pauschal, unabhängig von der Lektionsanzahl
    Alle Abonnements einer Gruppe teilen eine Währung; es wird nicht umgerechnet.
    """

    def __init__(self, config: Optional[PricingConfig] = None) -> None:
        self.config = config or PricingConfig()

    def months_needed(self, subscription: Subscription) -> int:
        return math.ceil(
            subscription.number_of_lectures_included / self.config.lectures_per_month
        )

    def subscription_contribution(self, subscription: Subscription) -> float:
        """Anteil eines einzelnen Abonnements am Gesamtpreis."""
        if subscription.type == SubscriptionType.MONTHLY:
            return subscription.cost.amount * self.months_needed(subscription)
        return subscription.cost.amount

    def calculate_total_price(self, subscriptions: list[Subscription]) -> Cost:
        if not subscriptions:
            return Cost(amount=0, currency=self.config.default_currency)

        currency = subscriptions[0].cost.currency
        mixed = {s.cost.currency for s in subscriptions} - {currency}
        if mixed:
            logger.warning(
                f"Abonnements mit abweichender Währung {sorted(c.value for c in mixed)} "
                f"werden ohne Umrechnung in {currency.value} summiert"
            )

        total = sum(self.subscription_contribution(s) for s in subscriptions)
        return Cost(amount=total, currency=currency)


def has_subscription_type(
    subscriptions: list[Subscription], sub_type: SubscriptionType
) -> bool:
    return any(s.type == sub_type for s in subscriptions)


def calculate_total_price(subscriptions: list[Subscription]) -> Cost:
    """Preis mit Default-Annahmen (4 Lektionen/Monat, EGP ohne Abonnement)."""
    return PricingEngine().calculate_total_price(subscriptions)
