from __future__ import annotations

from dataclasses import dataclass

from quickpos.time_utils import to_utc_z


@dataclass(frozen=True)
class Disbursement:
    """Cash outflow (business expense). Append-only, never mutated."""
    id: str
    amount: int | float
    comment: str = ""
    timestamp: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": self.amount,
            "comment": self.comment,
            "timestamp": self.timestamp,
        }

    def to_api_dict(self) -> dict:
        data = self.to_dict()
        data["createdAt"] = to_utc_z(self.timestamp)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Disbursement":
        return cls(
            id=data["id"],
            amount=data.get("amount") or 0,
            comment=data.get("comment", ""),
            timestamp=data.get("timestamp", 0),
        )
