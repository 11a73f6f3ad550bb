from __future__ import annotations

from dataclasses import dataclass

from quickpos.time_utils import to_utc_z

DEBT_STATUS_PENDING = "pending"
DEBT_STATUS_PAID = "paid"


@dataclass(frozen=True)
class Debt:
    """
    Credit sale tracked until fully paid.

    Invariants: 0 <= total_paid <= total_amount;
    status == "paid" iff total_paid >= total_amount.
    """
    id: str
    customer_name: str
    customer_phone: str
    total_amount: int | float
    total_paid: int | float = 0
    status: str = DEBT_STATUS_PENDING
    timestamp: int = 0
    order_id: str | None = None
    last_payment_date: int | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == DEBT_STATUS_PAID

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "totalAmount": self.total_amount,
            "totalPaid": self.total_paid,
            "status": self.status,
            "timestamp": self.timestamp,
        }
        if self.order_id is not None:
            data["orderId"] = self.order_id
        if self.last_payment_date is not None:
            data["lastPaymentDate"] = self.last_payment_date
        return data

    def to_api_dict(self) -> dict:
        data = self.to_dict()
        data["createdAt"] = to_utc_z(self.timestamp)
        data["lastPaymentAt"] = to_utc_z(self.last_payment_date)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Debt":
        return cls(
            id=data["id"],
            customer_name=data.get("customerName", ""),
            customer_phone=data.get("customerPhone", ""),
            total_amount=data.get("totalAmount") or 0,
            total_paid=data.get("totalPaid") or 0,
            status=data.get("status", DEBT_STATUS_PENDING),
            timestamp=data.get("timestamp", 0),
            order_id=data.get("orderId"),
            last_payment_date=data.get("lastPaymentDate"),
        )
