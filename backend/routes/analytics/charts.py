"""
Month Statistics and Chart Endpoints

Endpoints:
- /statistics - Sold value, sold count and not-sold count
- /bar-chart  - Price-range histogram
- /pie-chart  - Record count per category

All three take ?month= (required) and ?year= and apply the same month filter.
"""

import time
from flask import jsonify
from routes.analytics import analytics_bp
from routes.analytics._route_utils import route_logger, log_success, log_error, parse_period_args
from api.middleware.error_envelope import make_error_response, validation_error_response
from services.dashboard_service import get_statistics, get_bar_chart, get_pie_chart
from utils.normalize import ValidationError

logger = route_logger("charts")


@analytics_bp.route("/statistics", methods=["GET"])
def statistics():
    """
    Totals for one month.

    Returns:
        {totalSales, totalSold, totalNotSold}; all zero when the month is empty
    """
    start = time.perf_counter()
    try:
        period = parse_period_args()
    except ValidationError as e:
        return validation_error_response(e)

    try:
        result = get_statistics(period)
    except Exception as e:
        log_error(logger, "/api/statistics", start, e, {"period": period.label})
        return make_error_response("INTERNAL_ERROR", "Error fetching statistics")

    log_success(logger, "/api/statistics", start, {"period": period.label})
    return jsonify(result)


@analytics_bp.route("/bar-chart", methods=["GET"])
def bar_chart():
    """
    Price histogram for one month.

    Buckets are [0,100), [100,200), ... [800,900), [900, inf). Only
    non-empty buckets are returned, ordered by lower bound.

    Returns:
        [{_id, min, max, label, count}, ...]
    """
    start = time.perf_counter()
    try:
        period = parse_period_args()
    except ValidationError as e:
        return validation_error_response(e)

    try:
        result = get_bar_chart(period)
    except Exception as e:
        log_error(logger, "/api/bar-chart", start, e, {"period": period.label})
        return make_error_response("INTERNAL_ERROR", "Error fetching bar chart data")

    log_success(logger, "/api/bar-chart", start, {"period": period.label, "buckets": len(result)})
    return jsonify(result)


@analytics_bp.route("/pie-chart", methods=["GET"])
def pie_chart():
    """
    Category counts for one month, largest first.

    Returns:
        [{_id: category, count}, ...]
    """
    start = time.perf_counter()
    try:
        period = parse_period_args()
    except ValidationError as e:
        return validation_error_response(e)

    try:
        result = get_pie_chart(period)
    except Exception as e:
        log_error(logger, "/api/pie-chart", start, e, {"period": period.label})
        return make_error_response("INTERNAL_ERROR", "Error fetching pie chart data")

    log_success(logger, "/api/pie-chart", start, {"period": period.label, "categories": len(result)})
    return jsonify(result)
