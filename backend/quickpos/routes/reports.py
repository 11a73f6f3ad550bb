from flask import Blueprint, current_app, jsonify, request

from quickpos import get_repository
from quickpos.services import reporting_service
from quickpos.time_utils import resolve_timezone


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/financial")
def financial_report():
    """
    Query params:
    - mode: today | day | month | year (default today)
    - value: YYYY-MM-DD | YYYY-MM | YYYY (required unless mode=today)
    """
    mode = request.args.get("mode", "today")
    value = request.args.get("value")

    try:
        window = reporting_service.ReportWindow.from_params(mode, value)
        report = reporting_service.financial_report(
            get_repository(),
            window,
            tz=resolve_timezone(current_app.config["SHOP_TIMEZONE"]),
        )
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to build financial report")
        return jsonify({"error": "Internal server error"}), 500
