# Overview: Checkout orchestration; prices the cart, writes the order, opens a debt, adjusts stock.

"""
Checkout Service

WHY: Checkout is the one place where pricing, the order history, the debt
ledger and stock meet. Everything is validated and priced before the first
write, so a rejected checkout leaves no partial state.

STOCK: no floor check. Selling more than is on hand drives stock negative;
low_stock() reports it afterwards instead of blocking the sale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..models import Debt, Order, Product
from ..storage import ShopRepository
from ..time_utils import now_ms as _now_ms
from ..validation import parse_amount
from .cart_service import CartEntry, PricedCart, price_cart, to_order_items
from .debt_service import create_from_underpayment
from .document_service import next_order_id

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Raised for checkout input errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass(frozen=True)
class CheckoutResult:
    order: Order
    debt: Debt | None
    amount_paid: int | float

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_api_dict(),
            "debt": self.debt.to_api_dict() if self.debt else None,
            "amountPaid": self.amount_paid,
        }


def apply_stock_movements(products: list[Product], cart: Iterable[CartEntry]) -> list[Product]:
    """
    Decrement stock for each purchased product and variation.

    Variation products get their aggregate stock recomputed from the
    variations; plain products are decremented directly.
    """
    by_id = {p.id: p for p in products}
    for entry in cart:
        product = by_id.get(entry.product_id)
        if product is None:
            continue
        variation = product.find_variation(entry.variation_label)
        if product.has_variations:
            # Stock of a variation product is always derived from its variations
            if variation is not None:
                variation.stock -= entry.quantity
            product.recompute_stock()
        else:
            product.stock -= entry.quantity
    return products


def checkout(
    repo: ShopRepository,
    cart: list[CartEntry],
    *,
    shop_name: str,
    customer_name: str,
    customer_phone: str,
    amount_paid=None,
    now_ms: int | None = None,
) -> CheckoutResult:
    """
    Complete a sale.

    Args:
        amount_paid: None for a fully paid sale; otherwise the amount the
            customer handed over (0 allowed). Below the total opens a debt.

    Raises:
        CheckoutError: empty cart or missing customer/shop identity
        UnknownProduct: a cart entry is not in the catalog or misses its variation
        InvalidAmount: amount_paid is non-numeric or negative
    """
    if not cart:
        raise CheckoutError("Cannot checkout an empty cart")

    missing = [
        name for name, value in (
            ("shop_name", shop_name),
            ("customer_name", customer_name),
            ("customer_phone", customer_phone),
        )
        if not value or not str(value).strip()
    ]
    if missing:
        raise CheckoutError(f"Missing required fields: {', '.join(missing)}", details={"fields": missing})

    products = repo.get_products()
    priced: PricedCart = price_cart(cart, products)
    total = priced.total

    paid = total if amount_paid is None else parse_amount(
        amount_paid, field="amount_paid", allow_zero=True, max_amount=None
    )
    is_debt = paid < total

    timestamp = now_ms if now_ms is not None else _now_ms()
    order = Order(
        id=next_order_id(),
        shop_name=shop_name.strip(),
        customer_name=customer_name.strip(),
        customer_phone=customer_phone.strip(),
        items=to_order_items(priced),
        total=total,
        timestamp=timestamp,
        is_debt=is_debt,
    )

    repo.save_order(order)

    debt = None
    if is_debt:
        debt = create_from_underpayment(order, paid, now_ms=timestamp)
        repo.add_debt(debt)

    repo.save_products(apply_stock_movements(products, cart))

    logger.info(
        "Checkout %s: %s item(s), total %s, paid %s%s",
        order.id, priced.item_count, total, paid,
        f", debt {debt.id}" if debt else "",
    )
    return CheckoutResult(order=order, debt=debt, amount_paid=paid)
