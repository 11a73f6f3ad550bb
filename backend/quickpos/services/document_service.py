# Overview: Identifier allocation for orders, debts, products and disbursements.

from __future__ import annotations

import secrets
import string

_ALPHABET = string.digits + string.ascii_uppercase

ORDER_ID_LENGTH = 9
DEBT_PREFIX = "DBT_"
PRODUCT_PREFIX = "PRD_"
SUFFIX_LENGTH = 6
DISBURSEMENT_ID_LENGTH = 9


def _token(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def next_order_id() -> str:
    """9-char uppercase base-36 order number (e.g. "K3J9X0A2Q")."""
    return _token(ORDER_ID_LENGTH)


def next_debt_id() -> str:
    return DEBT_PREFIX + _token(SUFFIX_LENGTH)


def next_product_id() -> str:
    return PRODUCT_PREFIX + _token(SUFFIX_LENGTH)


def next_disbursement_id() -> str:
    return _token(DISBURSEMENT_ID_LENGTH).lower()
