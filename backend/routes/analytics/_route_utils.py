"""
Shared route utilities for analytics endpoints.

Goals:
- Structured logger usage instead of ad-hoc prints
- One place that turns query-string inputs into typed values
- Keep endpoint handlers small and consistent
"""

import time
import logging
from typing import Any, Dict, Optional, Tuple

from flask import request

from constants import DEFAULT_PAGE, DEFAULT_PER_PAGE, MAX_PAGE, MAX_PER_PAGE
from utils.normalize import to_int, to_str
from utils.period import MonthPeriod, resolve_month_period


def route_logger(name: str) -> logging.Logger:
    """Return namespaced logger for analytics routes."""
    return logging.getLogger(f"analytics.{name}")


def elapsed_ms(start_time: float) -> int:
    """Return milliseconds since a time.perf_counter() start value."""
    return int((time.perf_counter() - start_time) * 1000)


def log_success(
    logger: logging.Logger,
    route: str,
    start_time: float,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    payload = {"route": route, "elapsed_ms": elapsed_ms(start_time)}
    if details:
        payload.update(details)
    logger.info("route_success %s", payload)


def log_error(
    logger: logging.Logger,
    route: str,
    start_time: float,
    err: Exception,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    payload = {"route": route, "elapsed_ms": elapsed_ms(start_time)}
    if details:
        payload.update(details)
    logger.exception("route_error %s err=%s", payload, err)


# =============================================================================
# QUERY PARAMS
# =============================================================================

def parse_period_args() -> MonthPeriod:
    """
    Resolve ?month=&year= to a MonthPeriod.

    Raises:
        ValidationError: month missing or out of range, year invalid
    """
    return resolve_month_period(request.args.get("month"), request.args.get("year"))


def parse_page_args() -> Tuple[int, int]:
    """
    Parse ?page=&perPage=.

    page must lie in [1, MAX_PAGE]. perPage above MAX_PER_PAGE is clamped
    to MAX_PER_PAGE rather than rejected.

    Raises:
        ValidationError: non-numeric, non-positive or page above MAX_PAGE
    """
    page = to_int(
        request.args.get("page"),
        default=DEFAULT_PAGE,
        minimum=1,
        maximum=MAX_PAGE,
        field="page",
    )
    per_page = to_int(
        request.args.get("perPage"),
        default=DEFAULT_PER_PAGE,
        minimum=1,
        field="perPage",
    )
    return page, min(per_page, MAX_PER_PAGE)


def parse_search_arg() -> Optional[str]:
    return to_str(request.args.get("search"))
