# Overview: Pytest coverage for financial reports and disbursements.

import copy
from datetime import date, timedelta, timezone

import pytest

from conftest import ts
from quickpos.models import Debt, Disbursement, Order, OrderItem
from quickpos.services import debt_service, reporting_service
from quickpos.services.reporting_service import ReportError, ReportWindow, aggregate
from quickpos.validation import InvalidAmount

UTC = timezone.utc


def make_order(order_id, total, cost, timestamp):
    return Order(
        id=order_id,
        shop_name="Boutique",
        customer_name="Awa",
        customer_phone="2250700000001",
        items=(OrderItem("PRD_SOAP01", "Savon", total, cost, 1),),
        total=total,
        timestamp=timestamp,
    )


def make_debt(debt_id, total_amount, total_paid, timestamp, status="pending"):
    return Debt(
        id=debt_id,
        customer_name="Awa",
        customer_phone="2250700000001",
        total_amount=total_amount,
        total_paid=total_paid,
        status=status,
        timestamp=timestamp,
    )


class TestReportWindow:
    def test_day(self):
        window = ReportWindow.for_day(date(2026, 10, 19))
        assert window.matches(ts(2026, 10, 19, 0, 1), UTC)
        assert window.matches(ts(2026, 10, 19, 23, 59), UTC)
        assert not window.matches(ts(2026, 10, 20, 0, 0), UTC)

    def test_month(self):
        window = ReportWindow.for_month(2026, 10)
        assert window.matches(ts(2026, 10, 1), UTC)
        assert window.matches(ts(2026, 10, 31), UTC)
        assert not window.matches(ts(2025, 10, 15), UTC)

    def test_year(self):
        window = ReportWindow.for_year(2026)
        assert window.matches(ts(2026, 1, 1, 0, 0), UTC)
        assert not window.matches(ts(2025, 12, 31, 23, 59), UTC)

    def test_today_uses_injected_date(self):
        window = ReportWindow.today()
        assert window.matches(ts(2026, 10, 19), UTC, today=date(2026, 10, 19))
        assert not window.matches(ts(2026, 10, 18), UTC, today=date(2026, 10, 19))

    def test_calendar_date_follows_timezone(self):
        # 23:30 UTC on the 19th is already the 20th at UTC+2
        plus_two = timezone(timedelta(hours=2))
        window = ReportWindow.for_day(date(2026, 10, 20))
        assert window.matches(ts(2026, 10, 19, 23, 30), plus_two)
        assert not window.matches(ts(2026, 10, 19, 23, 30), UTC)

    @pytest.mark.parametrize("mode,value,expected", [
        ("today", None, ReportWindow(mode="today")),
        ("day", "2026-10-19", ReportWindow(mode="day", day=date(2026, 10, 19))),
        ("month", "2026-10", ReportWindow(mode="month", month=(2026, 10))),
        ("year", "2026", ReportWindow(mode="year", year=2026)),
        (None, None, ReportWindow(mode="today")),
    ])
    def test_from_params(self, mode, value, expected):
        assert ReportWindow.from_params(mode, value) == expected

    @pytest.mark.parametrize("mode,value", [
        ("week", "2026-42"),
        ("day", None),
        ("day", "19/10/2026"),
        ("month", "2026-13"),
        ("month", "2026"),
        ("year", "twenty"),
    ])
    def test_from_params_rejects_bad_selectors(self, mode, value):
        with pytest.raises(ReportError):
            ReportWindow.from_params(mode, value)


class TestAggregate:
    def test_single_order_and_expense(self):
        window = ReportWindow.for_day(date(2026, 10, 19))
        report = aggregate(
            [make_order("O1", 1000, 400, ts(2026, 10, 19))],
            [],
            [Disbursement("D1", 100, "Transport", ts(2026, 10, 19))],
            window,
            tz=UTC,
        )
        assert report.gross_revenue == 1000
        assert report.total_cost == 400
        assert report.gross_margin == 600
        assert report.net_profit == 500
        assert report.pending_debt_in_window == 0
        assert report.total_expenses == 100
        assert report.cash_on_hand == 900
        assert report.order_count == 1
        assert report.disbursement_count == 1

    def test_empty_window_is_all_zero(self):
        report = aggregate([], [], [], ReportWindow.for_year(2026), tz=UTC)
        assert report == reporting_service.FinancialReport()
        assert set(report.to_dict().values()) == {0}

    def test_records_outside_window_are_ignored(self):
        window = ReportWindow.for_day(date(2026, 10, 19))
        report = aggregate(
            [make_order("O1", 1000, 400, ts(2026, 10, 19)), make_order("O2", 5000, 1000, ts(2026, 10, 18))],
            [make_debt("DBT_A", 700, 0, ts(2026, 10, 18))],
            [Disbursement("D1", 300, "", ts(2026, 10, 20))],
            window,
            tz=UTC,
        )
        assert report.gross_revenue == 1000
        assert report.total_cost == 400
        assert report.pending_debt_in_window == 0
        assert report.total_expenses == 0

    def test_pending_debt_reduces_cash_on_hand(self):
        window = ReportWindow.for_day(date(2026, 10, 19))
        report = aggregate(
            [make_order("O1", 1000, 400, ts(2026, 10, 19))],
            [make_debt("DBT_A", 1000, 300, ts(2026, 10, 19))],
            [Disbursement("D1", 100, "", ts(2026, 10, 19))],
            window,
            tz=UTC,
        )
        assert report.pending_debt_in_window == 700
        assert report.net_profit == 500
        assert report.cash_on_hand == 200

    def test_debt_paid_after_window_no_longer_counts(self):
        window = ReportWindow.for_day(date(2026, 10, 19))
        order = make_order("O1", 1000, 400, ts(2026, 10, 19))
        debt = make_debt("DBT_A", 1000, 300, ts(2026, 10, 19))
        expenses = [Disbursement("D1", 100, "", ts(2026, 10, 19))]

        before = aggregate([order], [debt], expenses, window, tz=UTC)
        assert before.pending_debt_in_window == 700

        # Settled on the 25th: the report for the 19th changes retroactively
        settled = debt_service.apply_payment(debt, 700, now_ms=ts(2026, 10, 25))
        after = aggregate([order], [settled], expenses, window, tz=UTC)
        assert after.pending_debt_in_window == 0
        assert after.cash_on_hand == 900

    def test_costs_sum_every_item(self):
        order = Order(
            id="O1",
            shop_name="Boutique",
            customer_name="Awa",
            customer_phone="2250700000001",
            items=(
                OrderItem("PRD_SOAP01", "Savon", 1070, 680, 13),
                OrderItem("PRD_RICE01", "Riz", 300, 220, 2),
            ),
            total=1370,
            timestamp=ts(2026, 10, 19),
        )
        report = aggregate([order], [], [], ReportWindow.for_month(2026, 10), tz=UTC)
        assert report.total_cost == 900
        assert report.gross_margin == 470

    def test_aggregate_is_idempotent_and_read_only(self):
        orders = [make_order("O1", 1000, 400, ts(2026, 10, 19))]
        debts = [make_debt("DBT_A", 500, 100, ts(2026, 10, 19))]
        expenses = [Disbursement("D1", 100, "", ts(2026, 10, 19))]
        snapshot = copy.deepcopy((orders, debts, expenses))
        window = ReportWindow.for_year(2026)

        first = aggregate(orders, debts, expenses, window, tz=UTC)
        second = aggregate(orders, debts, expenses, window, tz=UTC)

        assert first == second
        assert (orders, debts, expenses) == snapshot


class TestRepositoryReports:
    def test_financial_report(self, repo):
        repo.save_order(make_order("O1", 1000, 400, ts(2026, 10, 19)))
        repo.add_debt(make_debt("DBT_A", 1000, 600, ts(2026, 10, 19)))
        repo.save_disbursement(Disbursement("D1", 100, "", ts(2026, 10, 19)))

        result = reporting_service.financial_report(repo, ReportWindow.for_month(2026, 10), tz=UTC)

        assert result["mode"] == "month"
        assert result["period"] == "2026-10"
        assert result["report"]["cash_on_hand"] == 500
        assert result["report"]["net_profit"] == 500

    def test_today_label(self, repo):
        result = reporting_service.financial_report(repo, ReportWindow.today(), tz=UTC, today=date(2026, 10, 19))
        assert result["period"] == "2026-10-19"


class TestDisbursements:
    def test_record_prepends(self, repo):
        first = reporting_service.record_disbursement(repo, 2500, "Transport", now_ms=1)
        second = reporting_service.record_disbursement(repo, "1200.5", "  Electricite ", now_ms=2)

        assert second.amount == 1200.5
        assert second.comment == "Electricite"
        assert [d.id for d in reporting_service.list_disbursements(repo)] == [second.id, first.id]

    @pytest.mark.parametrize("amount", [0, -100, "", "abc", None, 2_000_000_000])
    def test_invalid_amount_writes_nothing(self, repo, amount):
        with pytest.raises(InvalidAmount):
            reporting_service.record_disbursement(repo, amount, "x")
        assert repo.get_disbursements() == []
