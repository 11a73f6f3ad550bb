from __future__ import annotations

from ..extensions import db


class KeyValueEntry(db.Model):
    """
    One persisted collection.

    WHY: The shop data lives as whole JSON collections addressed by string
    keys (products, orders, debts, disbursements). Each row is one key.
    """
    __tablename__ = "kv_entries"

    key = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "size": len(self.value or ""),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
