"""
Transaction Listing Endpoint

Endpoints:
- /transactions - One page of a month's transactions, with free-text search
"""

import time
from flask import jsonify
from routes.analytics import analytics_bp
from routes.analytics._route_utils import (
    route_logger, log_success, log_error,
    parse_period_args, parse_page_args, parse_search_arg,
)
from api.middleware.error_envelope import make_error_response, validation_error_response
from utils.normalize import ValidationError

logger = route_logger("transactions")


@analytics_bp.route("/transactions", methods=["GET"])
def list_transactions():
    """
    List transactions sold in one calendar month.

    Query params:
        - month: 1-12 (required)
        - year: defaults to DEFAULT_SALES_YEAR
        - search: matches title/description (case-insensitive substring)
                  or, when numeric, price exactly
        - page: 1-based page number (default 1, max 1000000; above that
                is a 400 INVALID_PARAMS)
        - perPage: page size (default 10). Values above 100 are clamped to
                   100, and the response's perPage reports the applied size

    Example:
        GET /api/transactions?month=3&search=shirt&page=2&perPage=10

    Returns:
        {transactions: [...], total, page, perPage, totalPages}
    """
    start = time.perf_counter()
    from services.dashboard_service import list_transactions as fetch_page

    try:
        period = parse_period_args()
        page, per_page = parse_page_args()
        search = parse_search_arg()
    except ValidationError as e:
        return validation_error_response(e)

    try:
        result = fetch_page(period, search=search, page=page, per_page=per_page)
    except Exception as e:
        log_error(logger, "/api/transactions", start, e, {"period": period.label})
        return make_error_response("INTERNAL_ERROR", "Error fetching transactions")

    log_success(logger, "/api/transactions", start, {
        "period": period.label,
        "page": page,
        "total": result["total"],
    })
    return jsonify(result)
