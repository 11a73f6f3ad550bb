# Overview: Flask API routes for catalog operations; parses input and returns JSON responses.

# backend/quickpos/routes/products.py
"""
Catalog routes.

Products are created and edited here; checkout is the only other writer
(stock decrements). There is no delete endpoint: products are never removed.
"""
from flask import Blueprint, current_app, request

from .. import get_repository
from ..services import products_service
from ..services.products_service import ProductNotFound
from ..validation import ValidationError

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List the catalog.

    Query params:
    - q: str (optional) - name substring or exact barcode
    """
    search = request.args.get("q")
    products = products_service.list_products(get_repository(), search=search)
    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }


@products_bp.get("/low-stock")
def low_stock_products():
    """Products at or below the threshold (default LOW_STOCK_THRESHOLD), oversold included."""
    threshold = request.args.get("threshold", current_app.config["LOW_STOCK_THRESHOLD"], type=int)
    products = products_service.low_stock(get_repository().get_products(), threshold=threshold)
    return {
        "threshold": threshold,
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }


@products_bp.get("/barcode/<code>")
def product_by_barcode(code: str):
    product = products_service.find_by_barcode(get_repository(), code)
    if product is None:
        return {"error": f"Unknown barcode: {code}"}, 404
    return {"product": product.to_dict()}, 200


@products_bp.post("")
def create_product_route():
    """
    Create a new product.

    Request body:
    {
        "name": "Savon",
        "priceTiers": [{"quantity": 1, "totalPrice": 100}, {"quantity": 3, "totalPrice": 270}],
        "costTiers": [{"quantity": 1, "totalPrice": 60}],
        "stock": 40,
        "barcode": "6001234567890",  (optional)
        "hasVariations": false,
        "variations": []
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        product = products_service.create_product(get_repository(), payload)
    except ValidationError as e:
        return {"error": str(e), "details": e.details}, 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return {"product": product.to_dict()}, 201


@products_bp.put("/<product_id>")
def update_product_route(product_id: str):
    """Update a product; omitted fields keep their current values."""
    payload = request.get_json(silent=True) or {}

    try:
        product = products_service.update_product(get_repository(), product_id, payload)
    except ValidationError as e:
        return {"error": str(e), "details": e.details}, 400
    except ProductNotFound:
        return {"error": "Product not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return {"product": product.to_dict()}, 200
