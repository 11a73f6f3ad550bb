# Overview: Flask API route for customer suggestions derived from history.

from flask import Blueprint, jsonify, request

from .. import get_repository
from ..services import customer_service


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
def list_customers():
    """Unique customers (by phone) seen on orders and debts. ?q= filters by name or phone."""
    repo = get_repository()
    customers = customer_service.unique_customers(repo.get_orders(), repo.get_debts())
    customers = customer_service.search_customers(customers, request.args.get("q"))
    return jsonify({
        "items": [c.to_dict() for c in customers],
        "count": len(customers),
    }), 200
