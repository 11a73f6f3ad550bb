# backend/quickpos/services/products_service.py
"""
Products Service

Catalog rules:
- A product needs a name and at least one price tier.
- Tiers are stored sorted by quantity ascending.
- price/cost_price mirror the quantity=1 tier (0 when there is none).
- With variations, stock is the sum of the variation stocks; without,
  the variation list is cleared.
- Products are never hard-deleted.
"""
from __future__ import annotations

import logging

from ..models import PriceTier, Product, Variation
from ..storage import ShopRepository
from ..validation import (
    PayloadPolicy,
    ValidationError,
    parse_non_negative_int,
    require_text,
    validate_payload,
    validate_tiers,
)
from .document_service import next_product_id

logger = logging.getLogger(__name__)

PRODUCT_POLICY = PayloadPolicy(
    writable_fields={"name", "stock", "barcode", "hasVariations", "variations", "priceTiers", "costTiers", "imageUrl"},
    required_on_create={"name", "priceTiers"},
)

DEFAULT_LOW_STOCK_THRESHOLD = 5


class ProductNotFound(LookupError):
    """Raised when a product id is not in the catalog."""
    pass


def _unit_total(tiers: list[PriceTier]) -> int | float:
    for tier in tiers:
        if tier.quantity == 1:
            return tier.total_price
    return 0


def _parse_variations(raw) -> list[Variation]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("variations must be a list")

    variations = []
    labels: set[str] = set()
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValidationError(f"variations[{i}] must be an object")
        label = require_text(entry.get("label"), field=f"variations[{i}].label")
        if label in labels:
            raise ValidationError(f"variations has duplicate label {label}")
        labels.add(label)
        variations.append(Variation(
            id=str(entry.get("id") or f"VAR_{i + 1}"),
            label=label,
            stock=parse_non_negative_int(entry.get("stock", 0), field=f"variations[{i}].stock"),
        ))
    return variations


def build_product(product_id: str, data: dict) -> Product:
    """Normalize a validated payload into a Product following the catalog rules."""
    name = require_text(data.get("name"), field="name")

    price_tiers = [PriceTier.from_dict(t) for t in validate_tiers(data.get("priceTiers"), field="priceTiers")]
    if not price_tiers:
        raise ValidationError("At least one price tier is required")
    cost_tiers = [PriceTier.from_dict(t) for t in validate_tiers(data.get("costTiers"), field="costTiers")]

    price_tiers.sort(key=lambda t: t.quantity)
    cost_tiers.sort(key=lambda t: t.quantity)

    has_variations = bool(data.get("hasVariations", False))
    variations = _parse_variations(data.get("variations")) if has_variations else []

    product = Product(
        id=product_id,
        name=name,
        price=_unit_total(price_tiers),
        cost_price=_unit_total(cost_tiers),
        price_tiers=price_tiers,
        cost_tiers=cost_tiers,
        stock=0 if has_variations else parse_non_negative_int(data.get("stock", 0) or 0, field="stock"),
        has_variations=has_variations,
        variations=variations,
        barcode=(str(data["barcode"]).strip() or None) if data.get("barcode") else None,
        image_url=str(data.get("imageUrl") or ""),
    )
    product.recompute_stock()
    return product


def list_products(repo: ShopRepository, search: str | None = None) -> list[Product]:
    """Catalog in stored order; search matches a name substring or the exact barcode."""
    products = repo.get_products()
    if not search:
        return products
    term = search.lower()
    return [p for p in products if term in p.name.lower() or p.barcode == search]


def find_by_barcode(repo: ShopRepository, code: str) -> Product | None:
    for product in repo.get_products():
        if product.barcode and product.barcode == code:
            return product
    return None


def low_stock(products: list[Product], threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> list[Product]:
    """Products at or below the threshold, including oversold (negative) ones."""
    return [p for p in products if p.stock <= threshold]


def create_product(repo: ShopRepository, payload: dict) -> Product:
    """Validate and prepend a new product to the catalog."""
    data = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=False)
    product = build_product(next_product_id(), data)

    repo.save_products([product, *repo.get_products()])
    logger.info("Created product %s name=%s", product.id, product.name)
    return product


def update_product(repo: ShopRepository, product_id: str, payload: dict) -> Product:
    """
    Replace a product's editable fields.

    Fields absent from the payload keep their current values.

    Raises:
        ProductNotFound: unknown product id
    """
    patch = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=True)

    products = repo.get_products()
    for i, existing in enumerate(products):
        if existing.id == product_id:
            break
    else:
        raise ProductNotFound(f"Product {product_id} not found")

    merged = existing.to_dict()
    # Stock may be negative after overselling; only validate stock the client sends
    merged.pop("stock")
    merged.pop("variations")
    merged.update(patch)
    updated = build_product(product_id, merged)

    if "stock" not in patch and not updated.has_variations:
        updated.stock = existing.stock
    if "variations" not in patch and updated.has_variations and existing.has_variations:
        updated.variations = existing.variations
        updated.recompute_stock()
    products[i] = updated

    repo.save_products(products)
    logger.info("Updated product %s fields: %s", product_id, ", ".join(sorted(patch.keys())))
    return updated
