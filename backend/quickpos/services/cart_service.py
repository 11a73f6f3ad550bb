# Overview: Cart editing and pricing; builds priced lines from a catalog snapshot.

"""
Cart Service

WHY: The cart is edited one unit at a time at the counter and priced as a
whole at checkout. Pricing freezes into OrderItems whose price/cost are
whole-line tiered totals.

RULES:
- At most one entry per (product_id, variation_label).
- add/remove return a new list; the caller's cart is never mutated.
- Pricing an entry whose product is missing from the catalog raises
  UnknownProduct (no silent zero or NaN totals).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from ..models import OrderItem, Product, Variation
from ..validation import ValidationError, parse_non_negative_int
from .pricing_service import base_unit_price, compute_tiered_total, has_bulk_discount


class UnknownProduct(LookupError):
    """Raised when a cart entry references a product absent from the catalog."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass(frozen=True)
class CartEntry:
    product_id: str
    variation_label: str | None = None
    quantity: int = 1

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "variationLabel": self.variation_label,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class PricedLine:
    entry: CartEntry
    name: str
    base_price: int | float
    base_cost: int | float
    total_price: int | float
    total_cost: int | float
    applied_tier_discount: bool

    def to_dict(self) -> dict:
        data = self.entry.to_dict()
        data.update({
            "name": self.name,
            "basePrice": self.base_price,
            "baseCost": self.base_cost,
            "totalPrice": self.total_price,
            "totalCost": self.total_cost,
            "appliedTierDiscount": self.applied_tier_discount,
        })
        return data


@dataclass(frozen=True)
class PricedCart:
    lines: tuple[PricedLine, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int | float:
        return sum(line.total_price for line in self.lines)

    @property
    def total_cost(self) -> int | float:
        return sum(line.total_cost for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.entry.quantity for line in self.lines)

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total": self.total,
            "totalCost": self.total_cost,
            "itemCount": self.item_count,
        }


def _matches(entry: CartEntry, product_id: str, variation_label: str | None) -> bool:
    return entry.product_id == product_id and entry.variation_label == variation_label


def add_to_cart(cart: Iterable[CartEntry], product: Product, variation: Variation | None = None) -> list[CartEntry]:
    """Add one unit of product (or one of its variations)."""
    label = variation.label if variation else None
    entries = list(cart)
    for i, entry in enumerate(entries):
        if _matches(entry, product.id, label):
            entries[i] = replace(entry, quantity=entry.quantity + 1)
            return entries
    entries.append(CartEntry(product_id=product.id, variation_label=label, quantity=1))
    return entries


def remove_from_cart(cart: Iterable[CartEntry], product_id: str, variation_label: str | None = None) -> list[CartEntry]:
    """Remove one unit; the entry disappears when its quantity reaches 0."""
    entries = list(cart)
    for i, entry in enumerate(entries):
        if _matches(entry, product_id, variation_label):
            if entry.quantity > 1:
                entries[i] = replace(entry, quantity=entry.quantity - 1)
            else:
                del entries[i]
            break
    return entries


def parse_cart(raw: object) -> list[CartEntry]:
    """
    Build cart entries from a JSON list of {productId, variationLabel?, quantity}.

    Repeated (productId, variationLabel) pairs are merged.
    """
    if not isinstance(raw, list):
        raise ValidationError("items must be a list")

    merged: dict[tuple[str, str | None], int] = {}
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f"items[{i}] must be an object")
        product_id = item.get("productId")
        if not product_id or not isinstance(product_id, str):
            raise ValidationError(f"items[{i}].productId is required")
        quantity = parse_non_negative_int(item.get("quantity", 1), field=f"items[{i}].quantity")
        if quantity < 1:
            raise ValidationError(f"items[{i}].quantity must be >= 1")
        key = (product_id, item.get("variationLabel") or None)
        merged[key] = merged.get(key, 0) + quantity

    return [
        CartEntry(product_id=product_id, variation_label=label, quantity=quantity)
        for (product_id, label), quantity in merged.items()
    ]


def price_cart(cart: Iterable[CartEntry], catalog: Iterable[Product]) -> PricedCart:
    """
    Price every entry against the catalog snapshot.

    Raises:
        UnknownProduct: the product is not in the catalog, or it has
            variations and the entry names none of them
    """
    products = {p.id: p for p in catalog}

    lines = []
    for entry in cart:
        product = products.get(entry.product_id)
        if product is None:
            raise UnknownProduct(
                f"Product {entry.product_id} not found",
                details={"product_id": entry.product_id},
            )

        if product.has_variations and product.find_variation(entry.variation_label) is None:
            raise UnknownProduct(
                f"Product {entry.product_id} has no variation {entry.variation_label!r}",
                details={"product_id": entry.product_id, "variation_label": entry.variation_label},
            )

        base_price = base_unit_price(product.price_tiers, product.price)
        base_cost = base_unit_price(product.cost_tiers, product.cost_price)

        lines.append(PricedLine(
            entry=entry,
            name=product.name,
            base_price=base_price,
            base_cost=base_cost,
            total_price=compute_tiered_total(entry.quantity, base_price, product.price_tiers),
            total_cost=compute_tiered_total(entry.quantity, base_cost, product.cost_tiers),
            applied_tier_discount=has_bulk_discount(product.price_tiers, entry.quantity),
        ))

    return PricedCart(lines=tuple(lines))


def to_order_items(priced: PricedCart) -> tuple[OrderItem, ...]:
    """Freeze priced lines into order items (whole-line totals)."""
    return tuple(
        OrderItem(
            product_id=line.entry.product_id,
            name=line.name,
            price=line.total_price,
            cost_price=line.total_cost,
            quantity=line.entry.quantity,
            variation_label=line.entry.variation_label,
        )
        for line in priced.lines
    )
