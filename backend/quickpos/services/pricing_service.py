# Overview: Quantity-tiered price computation; pure functions, no storage access.

"""
Tier Pricing

WHY: Products can be sold (and bought) in lots, e.g. 1 for 100, 3 for 270,
10 for 800. A line's total is found by consuming the largest lots first.

GREEDY, NOT OPTIMAL: the decomposition takes as many of the largest lot as
fit, then the next, and so on. It does not search for the cheapest
combination across non-nested lot sizes. Results must stay reproducible
across releases, so do not "improve" this into an optimizer.
"""

from __future__ import annotations

from typing import Iterable

from ..models import PriceTier


def _unit_tier(tiers: Iterable[PriceTier]) -> PriceTier | None:
    for tier in tiers:
        if tier.quantity == 1:
            return tier
    return None


def compute_tiered_total(
    quantity: int,
    fallback_unit_price: int | float,
    tiers: Iterable[PriceTier] | None,
) -> int | float:
    """
    Total price of `quantity` units.

    - quantity <= 0 -> 0
    - no tiers -> quantity * fallback_unit_price
    - otherwise greedy over tiers sorted by quantity descending; units left
      over are priced at the quantity=1 tier, else at the fallback.

    Tiers with a non-positive quantity are skipped. On equal quantities the
    first one in the list wins (stable sort).
    """
    if quantity <= 0:
        return 0

    tier_list = list(tiers or [])
    if not tier_list:
        return quantity * fallback_unit_price

    remaining = quantity
    total: int | float = 0
    for tier in sorted(tier_list, key=lambda t: t.quantity, reverse=True):
        if tier.quantity <= 0:
            continue
        lots = remaining // tier.quantity
        if lots > 0:
            total += lots * tier.total_price
            remaining = remaining % tier.quantity

    if remaining > 0:
        unit_tier = _unit_tier(tier_list)
        unit_price = unit_tier.total_price if unit_tier else fallback_unit_price
        total += remaining * unit_price

    return total


def base_unit_price(tiers: Iterable[PriceTier] | None, flat_price: int | float | None) -> int | float:
    """
    Unit price used as the calculator fallback.

    The quantity=1 tier wins; a missing or zero tier falls back to the flat
    price, then to 0.
    """
    unit_tier = _unit_tier(tiers or [])
    if unit_tier and unit_tier.total_price:
        return unit_tier.total_price
    return flat_price or 0


def has_bulk_discount(tiers: Iterable[PriceTier] | None, quantity: int) -> bool:
    """True when some lot larger than one unit fits in `quantity`."""
    return any(1 < tier.quantity <= quantity for tier in tiers or [])
