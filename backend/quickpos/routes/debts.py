# Overview: Flask API routes for customer debts; parses input and returns JSON responses.

# backend/quickpos/routes/debts.py
"""
Customer debt routes.

Debts are opened by checkout; the only write here is recording a payment.
Overpayments are capped at the amount owed.
"""

from flask import Blueprint, request, jsonify, current_app

from .. import get_repository
from ..services import debt_service
from ..services.debt_service import DebtNotFound
from ..validation import InvalidAmount


debts_bp = Blueprint("debts", __name__, url_prefix="/api/debts")


@debts_bp.get("")
def list_debts():
    """
    List debts newest first.

    Query params:
    - q: str (optional) - customer name or phone
    """
    repo = get_repository()
    debts = debt_service.list_debts(repo, search=request.args.get("q"))
    return jsonify({
        "items": [debt_service.debt_summary(d) for d in debts],
        "count": len(debts),
        "total_to_collect": debt_service.total_to_collect(repo.get_debts()),
    }), 200


@debts_bp.post("/<debt_id>/payments")
def record_payment_route(debt_id: str):
    """
    Record a payment against a debt.

    Request body:
    {
        "amount": 500
    }

    Returns:
        200: updated debt
        400: amount missing, non-numeric or <= 0
        404: unknown debt
    """
    data = request.get_json(silent=True) or {}

    try:
        debt = debt_service.record_payment(get_repository(), debt_id, data.get("amount"))
        return jsonify({"debt": debt_service.debt_summary(debt)}), 200

    except InvalidAmount as e:
        return jsonify({"error": str(e)}), 400
    except DebtNotFound:
        return jsonify({"error": "Debt not found"}), 404
    except Exception:
        current_app.logger.exception("Failed to record debt payment")
        return jsonify({"error": "Internal server error"}), 500
