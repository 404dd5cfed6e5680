"""Recurring revenue figures derived from a page of active subscriptions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Any

MINOR_UNITS_PER_MAJOR = 100


def to_major_units(amount: int | None) -> float | None:
    """Convert a Stripe minor-unit amount (e.g. cents) to major units."""
    if amount is None:
        return None
    return amount / MINOR_UNITS_PER_MAJOR


@dataclass(frozen=True)
class SubscriptionMetrics:
    active_subscriptions: int
    mrr: float
    average_subscription_value: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _line_item_amount(item: Mapping[str, Any]) -> int:
    unit_amount = item.get("unit_amount")
    quantity = item.get("quantity")
    # missing price counts as free, missing quantity as a single seat
    return (unit_amount or 0) * (1 if quantity is None else quantity)


def compute_subscription_metrics(
    subscriptions: Iterable[Mapping[str, Any]],
) -> SubscriptionMetrics:
    """Compute MRR over one page of subscriptions.

    Each subscription is a mapping with an ``items`` list of line items
    carrying ``unit_amount`` (minor units) and ``quantity``.
    """
    subscriptions = list(subscriptions)
    total_minor = sum(
        _line_item_amount(item) for sub in subscriptions for item in sub.get("items") or []
    )
    count = len(subscriptions)
    mrr = to_major_units(total_minor)
    return SubscriptionMetrics(
        active_subscriptions=count,
        mrr=mrr,
        average_subscription_value=mrr / count if count > 0 else 0,
    )
