# Overview: Service-layer operations for customer debts; credit sales and partial payments.

"""
Debt Ledger

WHY: A customer may leave with goods after paying part of the order total.
The unpaid remainder is tracked as a Debt until it is fully paid.

LIFECYCLE:
- pending -> paid (terminal). No reversal, no cancellation.
- apply_payment is the only mutator. Overpayment is capped at the amount
  owed; it never produces a credit or a negative balance.
- Debts are never deleted.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..models import Debt, Order, DEBT_STATUS_PAID, DEBT_STATUS_PENDING
from ..storage import ShopRepository
from ..time_utils import now_ms as _now_ms
from ..validation import parse_amount
from .document_service import next_debt_id

logger = logging.getLogger(__name__)


class DebtError(Exception):
    """Raised for debt operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class DebtNotFound(DebtError):
    pass


def create_from_underpayment(order: Order, amount_already_paid: int | float, *, now_ms: int | None = None) -> Debt:
    """
    Open a debt for an order paid below its total.

    lastPaymentDate is only set when something was actually paid.
    """
    if amount_already_paid >= order.total:
        raise DebtError(
            "Order is fully paid; no debt to create",
            details={"order_id": order.id, "total": order.total, "paid": amount_already_paid},
        )

    timestamp = now_ms if now_ms is not None else _now_ms()
    return Debt(
        id=next_debt_id(),
        order_id=order.id,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        total_amount=order.total,
        total_paid=amount_already_paid,
        status=DEBT_STATUS_PENDING,
        timestamp=timestamp,
        last_payment_date=timestamp if amount_already_paid > 0 else None,
    )


def apply_payment(debt: Debt, amount, *, now_ms: int | None = None) -> Debt:
    """
    Apply a payment and return the updated debt.

    Raises:
        InvalidAmount: amount is non-numeric or <= 0 (debt untouched)
    """
    amount = parse_amount(amount, max_amount=None)

    new_paid = min(debt.total_paid + amount, debt.total_amount)
    status = DEBT_STATUS_PAID if new_paid >= debt.total_amount else DEBT_STATUS_PENDING

    return replace(
        debt,
        total_paid=new_paid,
        status=status,
        last_payment_date=now_ms if now_ms is not None else _now_ms(),
    )


def outstanding_balance(debt: Debt) -> int | float:
    return debt.total_amount - debt.total_paid


def progress_ratio(debt: Debt) -> float:
    """Share of the debt already paid, 0.0 to 1.0 (1.0 when nothing was owed)."""
    if not debt.total_amount:
        return 1.0
    return debt.total_paid / debt.total_amount


def total_to_collect(debts: list[Debt]) -> int | float:
    """Sum of outstanding balances over pending debts."""
    return sum(outstanding_balance(d) for d in debts if d.status == DEBT_STATUS_PENDING)


def debt_summary(debt: Debt) -> dict:
    data = debt.to_api_dict()
    data["outstanding"] = outstanding_balance(debt)
    data["progressPct"] = round(progress_ratio(debt) * 100)
    return data


# =============================================================================
# REPOSITORY OPERATIONS
# =============================================================================

def list_debts(repo: ShopRepository, search: str | None = None) -> list[Debt]:
    """Debts newest first, optionally filtered by customer name or phone."""
    debts = repo.get_debts()
    if not search:
        return debts
    term = search.lower()
    return [d for d in debts if term in d.customer_name.lower() or search in d.customer_phone]


def debt_for_order(repo: ShopRepository, order_id: str) -> Debt | None:
    for debt in repo.get_debts():
        if debt.order_id == order_id:
            return debt
    return None


def record_payment(repo: ShopRepository, debt_id: str, amount, *, now_ms: int | None = None) -> Debt:
    """
    Load a debt, apply a payment and persist it.

    Raises:
        DebtNotFound: unknown debt id
        InvalidAmount: amount is non-numeric or <= 0
    """
    debt = repo.get_debt(debt_id)
    if debt is None:
        raise DebtNotFound(f"Debt {debt_id} not found", details={"debt_id": debt_id})

    updated = apply_payment(debt, amount, now_ms=now_ms)
    repo.update_debt(updated)

    logger.info(
        "Payment recorded on debt %s: paid %s of %s (%s)",
        updated.id, updated.total_paid, updated.total_amount, updated.status,
    )
    return updated
