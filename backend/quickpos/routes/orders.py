# Overview: Flask API routes for order history and receipts.

from flask import Blueprint, jsonify, request

from .. import get_repository
from ..services import order_service
from ..services.order_service import OrderNotFound


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.get("")
def list_orders():
    """Order history, newest first. ?q= filters by customer name or order id."""
    orders = order_service.list_orders(get_repository(), search=request.args.get("q"))
    return jsonify({
        "items": [o.to_api_dict() for o in orders],
        "count": len(orders),
    }), 200


@orders_bp.get("/<order_id>/receipt")
def order_receipt(order_id: str):
    try:
        receipt = order_service.get_receipt(get_repository(), order_id)
    except OrderNotFound:
        return jsonify({"error": "Order not found"}), 404
    return jsonify(receipt), 200
