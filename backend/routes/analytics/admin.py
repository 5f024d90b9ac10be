"""
Admin and Health Endpoints

Endpoints:
- /seed   - Replace all transactions from the seed source (GET or POST)
- /health - Health check
"""

import time
from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from routes.analytics import analytics_bp
from routes.analytics._route_utils import route_logger, log_success, log_error
from api.middleware.error_envelope import make_error_response

logger = route_logger("admin")


@analytics_bp.route("/seed", methods=["GET", "POST"])
def seed():
    """
    Fetch the seed payload and atomically replace the transactions table.

    Returns:
        200 {message, inserted, deleted}
        502 UPSTREAM_ERROR / UPSTREAM_PAYLOAD_INVALID when the source fails
        500 INTERNAL_ERROR when the database replacement fails
    """
    start = time.perf_counter()
    from services.seed_loader import SeedFetchError, SeedPayloadError, seed_transactions

    try:
        result = seed_transactions()
    except SeedFetchError as e:
        log_error(logger, "/api/seed", start, e, {"status_code": e.status_code})
        return make_error_response("UPSTREAM_ERROR", f"Error fetching seed data: {e}")
    except SeedPayloadError as e:
        log_error(logger, "/api/seed", start, e, {"index": e.index})
        return make_error_response(
            "UPSTREAM_PAYLOAD_INVALID",
            str(e),
            details={"index": e.index, "errors": e.errors},
        )
    except Exception as e:
        log_error(logger, "/api/seed", start, e)
        return make_error_response("INTERNAL_ERROR", "Error seeding database")

    log_success(logger, "/api/seed", start, {
        "inserted": result.inserted,
        "deleted": result.deleted,
    })
    return jsonify({
        "message": "Database seeded successfully",
        "inserted": result.inserted,
        "deleted": result.deleted,
    })


@analytics_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    from models.database import db
    from models.transaction import Transaction
    from sqlalchemy import func, select

    try:
        records = db.session.execute(select(func.count(Transaction.row_id))).scalar()
    except SQLAlchemyError as e:
        logger.warning("health check failed: %s", e)
        return make_error_response("SERVICE_UNAVAILABLE", "Database unavailable")

    return jsonify({
        "status": "healthy",
        "records": int(records or 0),
    })
