# Overview: Flask API routes for expenses (disbursements).

from flask import Blueprint, jsonify, request, current_app

from .. import get_repository
from ..services import reporting_service
from ..validation import InvalidAmount


disbursements_bp = Blueprint("disbursements", __name__, url_prefix="/api/disbursements")


@disbursements_bp.get("")
def list_disbursements():
    disbursements = reporting_service.list_disbursements(get_repository())
    return jsonify({
        "items": [d.to_api_dict() for d in disbursements],
        "count": len(disbursements),
    }), 200


@disbursements_bp.post("")
def record_disbursement_route():
    """
    Record an expense.

    Request body:
    {
        "amount": 2500,
        "comment": "Transport"
    }
    """
    data = request.get_json(silent=True) or {}

    try:
        disbursement = reporting_service.record_disbursement(
            get_repository(),
            data.get("amount"),
            data.get("comment") or "",
        )
        return jsonify({"disbursement": disbursement.to_api_dict()}), 201

    except InvalidAmount as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to record disbursement")
        return jsonify({"error": "Internal server error"}), 500
