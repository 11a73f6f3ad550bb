from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PriceTier:
    """A bulk-pricing rule: `quantity` units sell (or cost) `total_price` together."""
    quantity: int
    total_price: int | float

    def to_dict(self) -> dict:
        return {"quantity": self.quantity, "totalPrice": self.total_price}

    @classmethod
    def from_dict(cls, data: dict) -> "PriceTier":
        return cls(quantity=data.get("quantity", 0), total_price=data.get("totalPrice", 0))


@dataclass
class Variation:
    id: str
    label: str
    stock: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "stock": self.stock}

    @classmethod
    def from_dict(cls, data: dict) -> "Variation":
        return cls(id=data["id"], label=data["label"], stock=data.get("stock", 0))


@dataclass
class Product:
    """
    Catalog entry.

    price/cost_price are the unit fallbacks used when a tier set has no
    quantity=1 entry. When has_variations is true, stock is the sum of the
    variation stocks.
    """
    id: str
    name: str
    price: int | float = 0
    cost_price: int | float = 0
    price_tiers: list[PriceTier] = field(default_factory=list)
    cost_tiers: list[PriceTier] = field(default_factory=list)
    stock: int = 0
    has_variations: bool = False
    variations: list[Variation] = field(default_factory=list)
    barcode: str | None = None
    image_url: str = ""

    def find_variation(self, label: str | None) -> Variation | None:
        if label is None:
            return None
        for variation in self.variations:
            if variation.label == label:
                return variation
        return None

    def recompute_stock(self) -> None:
        if self.has_variations:
            self.stock = sum(v.stock for v in self.variations)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "costPrice": self.cost_price,
            "priceTiers": [t.to_dict() for t in self.price_tiers],
            "costTiers": [t.to_dict() for t in self.cost_tiers],
            "stock": self.stock,
            "imageUrl": self.image_url,
            "hasVariations": self.has_variations,
            "variations": [v.to_dict() for v in self.variations],
        }
        if self.barcode:
            data["barcode"] = self.barcode
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            price=data.get("price") or 0,
            cost_price=data.get("costPrice") or 0,
            price_tiers=[PriceTier.from_dict(t) for t in data.get("priceTiers") or []],
            cost_tiers=[PriceTier.from_dict(t) for t in data.get("costTiers") or []],
            stock=data.get("stock", 0),
            has_variations=bool(data.get("hasVariations", False)),
            variations=[Variation.from_dict(v) for v in data.get("variations") or []],
            barcode=data.get("barcode") or None,
            image_url=data.get("imageUrl", ""),
        )
