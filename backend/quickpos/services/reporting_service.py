# Overview: Service-layer operations for financial reporting and expenses.

"""
Financial Reporting

Windows select records by their local calendar date, month or year (never by
elapsed time): a record is in the "day" window when its timestamp falls on
that calendar date in the shop timezone.

FIGURES (for the records in the window):
- gross_revenue = sum of order totals
- total_cost = sum of every item cost (already line totals)
- gross_margin = gross_revenue - total_cost
- pending_debt_in_window = outstanding balance of debts created in the
  window whose status is pending *today*. A debt created in the window and
  paid off later no longer counts, even for a past window.
- total_expenses = sum of disbursements
- net_profit = gross_margin - total_expenses
- cash_on_hand = gross_revenue - pending_debt_in_window - total_expenses

aggregate() is read-only: it never mutates its inputs.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, tzinfo
from typing import Iterable

from ..models import Debt, Disbursement, Order, DEBT_STATUS_PENDING
from ..storage import ShopRepository
from ..time_utils import local_date, now_ms as _now_ms, today as _today
from ..validation import parse_amount
from .document_service import next_disbursement_id

logger = logging.getLogger(__name__)

MODE_TODAY = "today"
MODE_DAY = "day"
MODE_MONTH = "month"
MODE_YEAR = "year"

VALID_MODES = [MODE_TODAY, MODE_DAY, MODE_MONTH, MODE_YEAR]


class ReportError(Exception):
    """Raised when report parameters are invalid."""
    pass


@dataclass(frozen=True)
class ReportWindow:
    mode: str
    day: date | None = None
    month: tuple[int, int] | None = None  # (year, month)
    year: int | None = None

    @classmethod
    def today(cls) -> "ReportWindow":
        return cls(mode=MODE_TODAY)

    @classmethod
    def for_day(cls, day: date) -> "ReportWindow":
        return cls(mode=MODE_DAY, day=day)

    @classmethod
    def for_month(cls, year: int, month: int) -> "ReportWindow":
        if not 1 <= month <= 12:
            raise ReportError("month must be between 1 and 12")
        return cls(mode=MODE_MONTH, month=(year, month))

    @classmethod
    def for_year(cls, year: int) -> "ReportWindow":
        return cls(mode=MODE_YEAR, year=year)

    @classmethod
    def from_params(cls, mode: str | None, value: str | None = None) -> "ReportWindow":
        """
        Parse request parameters.

        - today: value ignored
        - day: YYYY-MM-DD
        - month: YYYY-MM
        - year: YYYY
        """
        mode = (mode or MODE_TODAY).lower()
        if mode not in VALID_MODES:
            raise ReportError(f"mode must be one of {VALID_MODES}")

        if mode == MODE_TODAY:
            return cls.today()

        if not value:
            raise ReportError(f"value is required for mode {mode}")

        try:
            if mode == MODE_DAY:
                return cls.for_day(date.fromisoformat(value))
            if mode == MODE_MONTH:
                year_part, month_part = value.split("-")
                return cls.for_month(int(year_part), int(month_part))
            return cls.for_year(int(value))
        except ValueError:
            raise ReportError(f"Invalid {mode} selector: {value}")

    def matches(self, timestamp_ms: int | float, tz: tzinfo | None = None, today: date | None = None) -> bool:
        record_day = local_date(timestamp_ms, tz)
        if self.mode == MODE_TODAY:
            return record_day == (today or _today(tz))
        if self.mode == MODE_DAY:
            return record_day == self.day
        if self.mode == MODE_MONTH:
            return (record_day.year, record_day.month) == self.month
        if self.mode == MODE_YEAR:
            return record_day.year == self.year
        return False

    def label(self, tz: tzinfo | None = None, today: date | None = None) -> str:
        if self.mode == MODE_TODAY:
            return (today or _today(tz)).isoformat()
        if self.mode == MODE_DAY:
            return self.day.isoformat()
        if self.mode == MODE_MONTH:
            return f"{self.month[0]:04d}-{self.month[1]:02d}"
        return str(self.year)


@dataclass(frozen=True)
class FinancialReport:
    gross_revenue: int | float = 0
    total_cost: int | float = 0
    gross_margin: int | float = 0
    pending_debt_in_window: int | float = 0
    total_expenses: int | float = 0
    net_profit: int | float = 0
    cash_on_hand: int | float = 0
    order_count: int = 0
    debt_count: int = 0
    disbursement_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def aggregate(
    orders: Iterable[Order],
    debts: Iterable[Debt],
    disbursements: Iterable[Disbursement],
    window: ReportWindow,
    *,
    tz: tzinfo | None = None,
    today: date | None = None,
) -> FinancialReport:
    """Compute the financial figures for one window. Empty windows yield zeros."""
    def in_window(timestamp_ms) -> bool:
        return window.matches(timestamp_ms, tz, today)

    window_orders = [o for o in orders if in_window(o.timestamp)]
    window_debts = [d for d in debts if in_window(d.timestamp)]
    window_expenses = [e for e in disbursements if in_window(e.timestamp)]

    gross_revenue = sum(o.total for o in window_orders)
    total_cost = sum(item.cost_price or 0 for o in window_orders for item in o.items)
    pending_debt = sum(
        d.total_amount - d.total_paid for d in window_debts if d.status == DEBT_STATUS_PENDING
    )
    total_expenses = sum(e.amount for e in window_expenses)

    gross_margin = gross_revenue - total_cost
    return FinancialReport(
        gross_revenue=gross_revenue,
        total_cost=total_cost,
        gross_margin=gross_margin,
        pending_debt_in_window=pending_debt,
        total_expenses=total_expenses,
        net_profit=gross_margin - total_expenses,
        cash_on_hand=gross_revenue - pending_debt - total_expenses,
        order_count=len(window_orders),
        debt_count=len(window_debts),
        disbursement_count=len(window_expenses),
    )


def financial_report(
    repo: ShopRepository,
    window: ReportWindow,
    *,
    tz: tzinfo | None = None,
    today: date | None = None,
) -> dict:
    report = aggregate(
        repo.get_orders(),
        repo.get_debts(),
        repo.get_disbursements(),
        window,
        tz=tz,
        today=today,
    )
    return {
        "mode": window.mode,
        "period": window.label(tz, today),
        "report": report.to_dict(),
    }


# =============================================================================
# DISBURSEMENTS
# =============================================================================

def record_disbursement(repo: ShopRepository, amount, comment: str | None = "", *, now_ms: int | None = None) -> Disbursement:
    """
    Append an expense.

    Raises:
        InvalidAmount: amount is non-numeric or <= 0 (nothing written)
    """
    amount = parse_amount(amount)
    disbursement = Disbursement(
        id=next_disbursement_id(),
        amount=amount,
        comment=(comment or "").strip(),
        timestamp=now_ms if now_ms is not None else _now_ms(),
    )
    repo.save_disbursement(disbursement)
    logger.info("Disbursement %s recorded: %s (%s)", disbursement.id, amount, disbursement.comment)
    return disbursement


def list_disbursements(repo: ShopRepository) -> list[Disbursement]:
    return repo.get_disbursements()
