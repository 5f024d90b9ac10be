"""
Combined Dashboard Endpoint

Endpoints:
- /combined - Listing, statistics, bar chart and pie chart in one response

The four sections run concurrently (services.dashboard_service.get_combined).
If any section fails the whole request fails; there is no partial response.
"""

import time
from flask import jsonify
from routes.analytics import analytics_bp
from routes.analytics._route_utils import (
    route_logger, log_success, log_error,
    parse_period_args, parse_page_args, parse_search_arg,
)
from api.middleware.error_envelope import make_error_response, validation_error_response
from services.dashboard_service import CombinedQueryError, get_combined
from utils.normalize import ValidationError

logger = route_logger("dashboard")


@analytics_bp.route("/combined", methods=["GET"])
def combined():
    """
    Everything the dashboard needs for one month.

    Query params: month (required), year, search, page, perPage. The search
    applies to the listing section only. page and perPage follow the
    /transactions rules: page above 1000000 is a 400, perPage above 100 is
    clamped to 100 and reported as such in transactions.perPage.

    Returns:
        {
            "transactions": {transactions, total, page, perPage, totalPages},
            "statistics": {totalSales, totalSold, totalNotSold},
            "barChart": [...],
            "pieChart": [...]
        }
    """
    start = time.perf_counter()
    try:
        period = parse_period_args()
        page, per_page = parse_page_args()
        search = parse_search_arg()
    except ValidationError as e:
        return validation_error_response(e)

    try:
        result = get_combined(period, search=search, page=page, per_page=per_page)
    except CombinedQueryError as e:
        log_error(logger, "/api/combined", start, e, {"period": period.label, "section": e.section})
        return make_error_response("INTERNAL_ERROR", "Error fetching combined data")
    except Exception as e:
        log_error(logger, "/api/combined", start, e, {"period": period.label})
        return make_error_response("INTERNAL_ERROR", "Error fetching combined data")

    log_success(logger, "/api/combined", start, {
        "period": period.label,
        "total": result["transactions"]["total"],
    })
    return jsonify(result)
