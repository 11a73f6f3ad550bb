from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Customer:
    """
    Customer projection derived from orders and debts.

    Not stored: identity is the phone number repeated on each record.
    """
    name: str
    phone: str

    def to_dict(self) -> dict:
        return {"name": self.name, "phone": self.phone}
