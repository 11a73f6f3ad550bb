# backend/quickpos/routes/system.py
"""
System health and version endpoints.

The health check reads every collection through the repository so a broken
storage backend (missing table, unreadable JSON) shows up as unhealthy.
"""

import sys
import time
from flask import Blueprint, current_app

from .. import get_repository
from ..time_utils import now_ms, to_utc_z

system_bp = Blueprint("system", __name__)


def check_storage_health() -> dict:
    """
    Check storage connectivity by loading each collection.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        repo = get_repository()
        details = {
            "backend": current_app.config["STORAGE_BACKEND"],
            "products": len(repo.get_products()),
            "orders": len(repo.get_orders()),
            "debts": len(repo.get_debts()),
            "disbursements": len(repo.get_disbursements()),
        }
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Storage health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Storage error"
        }


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: storage healthy
    - 503: storage unhealthy
    """
    start_time = time.time()
    storage_health = check_storage_health()

    if storage_health["status"] == "unhealthy":
        overall_status = "unhealthy"
        http_status = 503
    else:
        overall_status = "healthy"
        http_status = 200

    total_elapsed_ms = (time.time() - start_time) * 1000

    response = {
        "status": overall_status,
        "timestamp": to_utc_z(now_ms()),
        "total_latency_ms": round(total_elapsed_ms, 2),
        "checks": {
            "storage": storage_health,
        }
    }

    return response, http_status


@system_bp.get("/version")
def version():
    """
    Version endpoint for deployment debugging.

    Does NOT expose secret keys, database credentials or internal paths.
    """
    env = "production" if not current_app.debug else "development"

    return {
        "api_version": "0.1.0",
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(now_ms()),
    }
