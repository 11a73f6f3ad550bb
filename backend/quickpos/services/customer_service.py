# Overview: Customer lookup derived from order and debt history.

from __future__ import annotations

from typing import Iterable

from ..models import Customer, Debt, Order


def unique_customers(orders: Iterable[Order], debts: Iterable[Debt]) -> list[Customer]:
    """
    One customer per phone number.

    Debts are read first, then orders, so the name on an order wins when the
    same phone appears on both. Order of first appearance is kept.
    """
    customers: dict[str, Customer] = {}
    for debt in debts:
        customers[debt.customer_phone] = Customer(name=debt.customer_name, phone=debt.customer_phone)
    for order in orders:
        customers[order.customer_phone] = Customer(name=order.customer_name, phone=order.customer_phone)
    return list(customers.values())


def search_customers(customers: Iterable[Customer], term: str | None) -> list[Customer]:
    """Case-insensitive name match or phone substring match."""
    customers = list(customers)
    if not term:
        return customers
    lowered = term.lower()
    return [c for c in customers if lowered in c.name.lower() or term in c.phone]
