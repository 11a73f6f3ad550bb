# Overview: Flask CLI command groups for bootstrap, reporting and debt inspection.

# backend/quickpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to quickpos (PowerShell: $env:FLASK_APP="quickpos").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init-db
#   Create the kv_entries table if missing (idempotent).
# - python -m flask system keys
#   List stored collection keys.
#
# Reports:
# - python -m flask reports financial --mode month --value 2026-10
#   Print revenue, cost, margin, pending debt, expenses, net profit, cash on hand.
#
# Debts:
# - python -m flask debts list [--pending-only]
#   List customer debts with outstanding balances.

import click
from flask import current_app
from flask.cli import with_appcontext

from . import get_repository
from .extensions import db
from .services import debt_service, reporting_service
from .time_utils import resolve_timezone


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db_command():
    """Create the key-value table (no-op when it exists)."""
    from . import models  # noqa: F401
    db.create_all()
    click.echo("Database initialized.")


@system_group.command('keys')
@with_appcontext
def list_keys_command():
    """List stored collection keys."""
    keys = get_repository().store.keys()
    if not keys:
        click.echo("No collections stored yet.")
        return
    for key in keys:
        click.echo(key)


@click.group('reports')
def reports_group():
    """Financial reporting commands."""


@reports_group.command('financial')
@click.option('--mode', type=click.Choice(reporting_service.VALID_MODES), default='today', show_default=True)
@click.option('--value', default=None, help='YYYY-MM-DD, YYYY-MM or YYYY depending on mode.')
@with_appcontext
def financial_report_command(mode, value):
    """Print the financial report for a window."""
    try:
        window = reporting_service.ReportWindow.from_params(mode, value)
    except reporting_service.ReportError as exc:
        raise click.BadParameter(str(exc))

    result = reporting_service.financial_report(
        get_repository(),
        window,
        tz=resolve_timezone(current_app.config["SHOP_TIMEZONE"]),
    )
    report = result["report"]

    click.echo(f"Period: {result['mode']} {result['period']}")
    click.echo(f"  Revenue:        {report['gross_revenue']:>14,}")
    click.echo(f"  Cost of goods:  {report['total_cost']:>14,}")
    click.echo(f"  Gross margin:   {report['gross_margin']:>14,}")
    click.echo(f"  Pending debt:   {report['pending_debt_in_window']:>14,}")
    click.echo(f"  Expenses:       {report['total_expenses']:>14,}")
    click.echo(f"  Net profit:     {report['net_profit']:>14,}")
    click.echo(f"  Cash on hand:   {report['cash_on_hand']:>14,}")


@click.group('debts')
def debts_group():
    """Customer debt commands."""


@debts_group.command('list')
@click.option('--pending-only', is_flag=True, help='Hide fully paid debts.')
@with_appcontext
def list_debts_command(pending_only):
    """List debts with outstanding balances."""
    debts = get_repository().get_debts()
    if pending_only:
        debts = [d for d in debts if not d.is_paid]

    if not debts:
        click.echo("No debts found.")
        return

    click.echo(f"{'ID':<12} {'Customer':<24} {'Phone':<16} {'Owed':>10} {'Paid':>10} Status")
    click.echo("-" * 84)
    for debt in debts:
        click.echo(
            f"{debt.id:<12} {debt.customer_name[:24]:<24} {debt.customer_phone:<16} "
            f"{debt.total_amount:>10,} {debt.total_paid:>10,} {debt.status}"
        )
    click.echo(f"\nTotal to collect: {debt_service.total_to_collect(debts):,}")


def register_commands(app):
    """Register all CLI command groups with the Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(reports_group)
    app.cli.add_command(debts_group)
