# Overview: Order history and receipt lookup.

from __future__ import annotations

from ..models import Order
from ..storage import ShopRepository
from .debt_service import debt_for_order


class OrderNotFound(LookupError):
    """Raised when an order id is not in the history."""
    pass


def list_orders(repo: ShopRepository, search: str | None = None) -> list[Order]:
    """Orders newest first; search matches customer name or order id (case-insensitive)."""
    orders = repo.get_orders()
    if not search:
        return orders
    term = search.lower()
    return [o for o in orders if term in o.customer_name.lower() or term in o.id.lower()]


def get_receipt(repo: ShopRepository, order_id: str) -> dict:
    """
    Receipt data for an order: the order, its debt (if any) and what is
    still owed on it.
    """
    order = repo.get_order(order_id)
    if order is None:
        raise OrderNotFound(f"Order {order_id} not found")

    debt = debt_for_order(repo, order.id)
    return {
        "order": order.to_api_dict(),
        "debt": debt.to_api_dict() if debt else None,
        "amountPaid": debt.total_paid if debt else order.total,
        "remaining": order.total - debt.total_paid if debt else 0,
    }
