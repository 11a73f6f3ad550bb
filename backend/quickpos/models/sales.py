from __future__ import annotations

from dataclasses import dataclass, field

from quickpos.time_utils import to_utc_z


@dataclass(frozen=True)
class OrderItem:
    """
    Frozen order line.

    WHY: price and cost_price hold the tiered total for the whole line,
    not a unit price. name is the product name at order time.
    """
    product_id: str
    name: str
    price: int | float
    cost_price: int | float
    quantity: int
    variation_label: str | None = None

    def to_dict(self) -> dict:
        data = {
            "productId": self.product_id,
            "name": self.name,
            "price": self.price,
            "costPrice": self.cost_price,
            "quantity": self.quantity,
        }
        if self.variation_label is not None:
            data["variationLabel"] = self.variation_label
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "OrderItem":
        return cls(
            product_id=data["productId"],
            name=data.get("name", ""),
            price=data.get("price") or 0,
            cost_price=data.get("costPrice") or 0,
            quantity=data.get("quantity", 0),
            variation_label=data.get("variationLabel"),
        )


@dataclass(frozen=True)
class Order:
    """Immutable sale record, written once at checkout."""
    id: str
    shop_name: str
    customer_name: str
    customer_phone: str
    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    total: int | float = 0
    timestamp: int = 0
    is_debt: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "shopName": self.shop_name,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "timestamp": self.timestamp,
            "isDebt": self.is_debt,
        }

    def to_api_dict(self) -> dict:
        data = self.to_dict()
        data["createdAt"] = to_utc_z(self.timestamp)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        return cls(
            id=data["id"],
            shop_name=data.get("shopName", ""),
            customer_name=data.get("customerName", ""),
            customer_phone=data.get("customerPhone", ""),
            items=tuple(OrderItem.from_dict(i) for i in data.get("items") or []),
            total=data.get("total") or 0,
            timestamp=data.get("timestamp", 0),
            is_debt=bool(data.get("isDebt", False)),
        )
