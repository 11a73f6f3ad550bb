# Overview: Storage port for the shop collections; key-value backends and the repository over them.

"""
QuickPOS storage invariants (authoritative)

- Every collection is stored whole under one string key, as JSON.
- orders, debts and disbursements are kept newest first (new records are
  prepended, not appended).
- Writes are whole-collection read-modify-write with no version check:
  one writer per store is assumed (last writer wins).
- Services receive a ShopRepository explicitly; there is no module-level store.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from .extensions import db
from .models import Debt, Disbursement, KeyValueEntry, Order, Product
from .services.concurrency import run_with_retry

PRODUCTS_KEY = "qpos_products"
ORDERS_KEY = "qpos_orders"
DEBTS_KEY = "qpos_debts"
DISBURSEMENTS_KEY = "qpos_disbursements"

STORAGE_BACKENDS = ("sql", "memory")


class StorageError(Exception):
    """Raised when a backend cannot be built or a stored value is unreadable."""
    pass


class KeyValueStore:
    """get/set by string key; values must be JSON-serializable."""

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """In-process store. Copies on read and write so callers never share state with it."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        # Round-trip through JSON so the memory backend rejects what SQL would reject
        self._data[key] = json.loads(json.dumps(value))

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqlKeyValueStore(KeyValueStore):
    """
    Store backed by the kv_entries table through the Flask-SQLAlchemy session.

    Requires an application context.
    """

    def get(self, key: str) -> Any:
        entry = db.session.get(KeyValueEntry, key)
        if entry is None:
            return None
        try:
            return json.loads(entry.value)
        except ValueError as exc:
            raise StorageError(f"Stored value for {key} is not valid JSON") from exc

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)

        def _op():
            entry = db.session.get(KeyValueEntry, key)
            if entry is None:
                db.session.add(KeyValueEntry(key=key, value=payload))
            else:
                entry.value = payload
            db.session.commit()

        run_with_retry(_op)

    def keys(self) -> list[str]:
        return [row.key for row in db.session.query(KeyValueEntry.key).order_by(KeyValueEntry.key).all()]


class ShopRepository:
    """Logical collections (products, orders, debts, disbursements) over a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self, key: str) -> list[dict]:
        data = self.store.get(key)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(f"Stored value for {key} is not a list")
        return data

    # --- Products ---
    def get_products(self) -> list[Product]:
        return [Product.from_dict(p) for p in self._load(PRODUCTS_KEY)]

    def save_products(self, products: list[Product]) -> None:
        self.store.set(PRODUCTS_KEY, [p.to_dict() for p in products])

    def get_product(self, product_id: str) -> Product | None:
        for product in self.get_products():
            if product.id == product_id:
                return product
        return None

    # --- Orders ---
    def get_orders(self) -> list[Order]:
        return [Order.from_dict(o) for o in self._load(ORDERS_KEY)]

    def save_order(self, order: Order) -> None:
        self.store.set(ORDERS_KEY, [order.to_dict(), *self._load(ORDERS_KEY)])

    def get_order(self, order_id: str) -> Order | None:
        for order in self.get_orders():
            if order.id == order_id:
                return order
        return None

    # --- Debts ---
    def get_debts(self) -> list[Debt]:
        return [Debt.from_dict(d) for d in self._load(DEBTS_KEY)]

    def save_debts(self, debts: list[Debt]) -> None:
        self.store.set(DEBTS_KEY, [d.to_dict() for d in debts])

    def add_debt(self, debt: Debt) -> None:
        self.save_debts([debt, *self.get_debts()])

    def update_debt(self, updated: Debt) -> None:
        self.save_debts([updated if d.id == updated.id else d for d in self.get_debts()])

    def get_debt(self, debt_id: str) -> Debt | None:
        for debt in self.get_debts():
            if debt.id == debt_id:
                return debt
        return None

    # --- Disbursements ---
    def get_disbursements(self) -> list[Disbursement]:
        return [Disbursement.from_dict(d) for d in self._load(DISBURSEMENTS_KEY)]

    def save_disbursement(self, disbursement: Disbursement) -> None:
        self.store.set(DISBURSEMENTS_KEY, [disbursement.to_dict(), *self._load(DISBURSEMENTS_KEY)])


def build_repository(backend: str) -> ShopRepository:
    if backend == "sql":
        return ShopRepository(SqlKeyValueStore())
    if backend == "memory":
        return ShopRepository(MemoryKeyValueStore())
    raise StorageError(f"Unknown STORAGE_BACKEND {backend!r}. Must be one of {STORAGE_BACKENDS}")
