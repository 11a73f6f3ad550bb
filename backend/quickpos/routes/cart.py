# Overview: Flask API routes for cart pricing and checkout; parses input and returns JSON responses.

# backend/quickpos/routes/cart.py
"""Cart pricing and checkout routes."""

from flask import Blueprint, request, jsonify, current_app

from .. import get_repository
from ..services import cart_service, checkout_service
from ..services.cart_service import UnknownProduct
from ..services.checkout_service import CheckoutError
from ..validation import ValidationError


cart_bp = Blueprint("cart", __name__, url_prefix="/api")


@cart_bp.post("/cart/price")
def price_cart_route():
    """
    Price a cart without writing anything.

    Request body:
    {
        "items": [{"productId": "PRD_X1Y2Z3", "variationLabel": "XL", "quantity": 3}]
    }
    """
    data = request.get_json(silent=True) or {}

    try:
        cart = cart_service.parse_cart(data.get("items", []))
        priced = cart_service.price_cart(cart, get_repository().get_products())
        return jsonify(priced.to_dict()), 200

    except ValidationError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except UnknownProduct as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to price cart")
        return jsonify({"error": "Internal server error"}), 500


@cart_bp.post("/checkout")
def checkout_route():
    """
    Complete a sale.

    Request body:
    {
        "items": [{"productId": "PRD_X1Y2Z3", "quantity": 2}],
        "shopName": "Boutique Awa",
        "customerName": "Kouassi",
        "customerPhone": "2250700000000",
        "amountPaid": 500  (optional; omitted = fully paid, below total = debt)
    }

    Returns:
        201: order (and debt when underpaid)
        400: invalid input or unknown product
    """
    data = request.get_json(silent=True) or {}

    try:
        cart = cart_service.parse_cart(data.get("items", []))
        result = checkout_service.checkout(
            get_repository(),
            cart,
            shop_name=data.get("shopName") or "",
            customer_name=data.get("customerName") or "",
            customer_phone=data.get("customerPhone") or "",
            amount_paid=data.get("amountPaid"),
        )
        return jsonify(result.to_dict()), 201

    except (ValidationError, CheckoutError, UnknownProduct) as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to checkout")
        return jsonify({"error": "Internal server error"}), 500
