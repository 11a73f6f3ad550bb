from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


# Maximum amount: 999,999,999 (currency units)
# This prevents nonsensical prices and payments
MAX_AMOUNT = 999_999_999


class ValidationError(ValueError):
    """400-level input problem."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class InvalidAmount(ValidationError):
    """A payment or disbursement amount is non-numeric or not positive."""


@dataclass(frozen=True)
class PayloadPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def parse_amount(
    value: Any,
    *,
    field: str = "amount",
    allow_zero: bool = False,
    max_amount: int | float | None = MAX_AMOUNT,
) -> int | float:
    """
    Coerce a client-supplied amount to a number.

    Accepts ints, floats and numeric strings ("1500", "12.5").
    Rejects booleans, NaN/inf, negatives and (unless allow_zero) zero.
    max_amount=None disables the ceiling (payments that are capped downstream).
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(f"{field} must be a number")

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise InvalidAmount(f"{field} must be a number")
        try:
            number: int | float = int(stripped)
        except ValueError:
            try:
                number = float(stripped)
            except ValueError:
                raise InvalidAmount(f"{field} must be a number")
    elif isinstance(value, (int, float)):
        number = value
    else:
        raise InvalidAmount(f"{field} must be a number")

    if isinstance(number, float) and not math.isfinite(number):
        raise InvalidAmount(f"{field} must be a finite number")
    if number < 0 or (number == 0 and not allow_zero):
        raise InvalidAmount(f"{field} must be > 0" if not allow_zero else f"{field} must be >= 0")
    if max_amount is not None and number > max_amount:
        raise InvalidAmount(f"{field} cannot exceed {max_amount:,}")
    return number


def parse_non_negative_int(value: Any, *, field: str) -> int:
    """Strict integer coercion (rejects floats, scientific notation and decimals)."""
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped or "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{field} must be a plain integer")
        try:
            number = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    else:
        raise ValidationError(f"{field} must be an integer")

    if number < 0:
        raise ValidationError(f"{field} must be >= 0")
    return number


def require_text(value: Any, *, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} cannot be blank")
    return str(value).strip()


def validate_payload(*, payload: Any, policy: PayloadPolicy, partial: bool) -> dict:
    """
    Validates incoming JSON against a policy allowlist.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")

    return dict(payload)


def validate_tiers(raw: Any, *, field: str) -> list[dict]:
    """
    Normalize a tier list: each entry needs quantity >= 1 and totalPrice >= 0,
    quantities unique within the set.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError(f"{field} must be a list")

    seen: set[int] = set()
    tiers = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValidationError(f"{field}[{i}] must be an object")
        quantity = parse_non_negative_int(entry.get("quantity"), field=f"{field}[{i}].quantity")
        if quantity < 1:
            raise ValidationError(f"{field}[{i}].quantity must be >= 1")
        if quantity in seen:
            raise ValidationError(f"{field} has duplicate quantity {quantity}")
        seen.add(quantity)
        total_price = parse_amount(entry.get("totalPrice"), field=f"{field}[{i}].totalPrice", allow_zero=True)
        tiers.append({"quantity": quantity, "totalPrice": total_price})
    return tiers
