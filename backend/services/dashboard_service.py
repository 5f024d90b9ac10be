"""
Dashboard Service - Month-scoped listing, statistics and chart data

One function per dashboard panel. Every panel resolves its rows through the
same filter routine (utils/filter_builder.build_transaction_filters), so the
combined endpoint and the single-panel endpoints always agree.

Usage:
    from services.dashboard_service import get_combined
    from utils.period import resolve_month_period

    period = resolve_month_period(3, 2022)
    result = get_combined(period, search=None, page=1, per_page=10)
"""

import logging
import math
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

from flask import current_app

from constants import DEFAULT_PAGE, DEFAULT_PER_PAGE, PRICE_BUCKET_BOUNDARIES
from db.store import TransactionStore, get_store
from utils.filter_builder import build_transaction_filters
from utils.period import MonthPeriod

logger = logging.getLogger('dashboard')


class CombinedQueryError(RuntimeError):
    """Raised when any section of the combined fan-out fails or times out."""

    def __init__(self, section: str, cause: Optional[BaseException] = None):
        super().__init__(f"combined section '{section}' failed: {cause}")
        self.section = section
        self.cause = cause


# ============================================================================
# QUERY TIMING DECORATOR
# ============================================================================

def log_timing(operation: str):
    """Decorator to log operation timing."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                logger.info(f"{operation} completed in {elapsed:.1f}ms")
                if elapsed > 1000:
                    logger.warning(f"SLOW OPERATION: {operation} took {elapsed:.1f}ms")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                logger.error(f"{operation} failed after {elapsed:.1f}ms: {e}")
                raise
        return wrapper
    return decorator


# ============================================================================
# PANELS
# ============================================================================

def total_pages(total: int, per_page: int) -> int:
    return math.ceil(total / per_page) if per_page > 0 else 0


@log_timing("list_transactions")
def list_transactions(
    period: MonthPeriod,
    search: Optional[str] = None,
    page: int = DEFAULT_PAGE,
    per_page: int = DEFAULT_PER_PAGE,
    store: Optional[TransactionStore] = None,
) -> Dict[str, Any]:
    """
    One page of month transactions matching `search`, plus the full match count.

    `total` always reflects the whole filtered set, not just the page.
    """
    store = store or get_store()
    conditions = build_transaction_filters(period, search)
    offset = (page - 1) * per_page

    transactions = store.find_page(conditions, offset=offset, limit=per_page)
    total = store.count(conditions)

    return {
        'transactions': transactions,
        'total': total,
        'page': page,
        'perPage': per_page,
        'totalPages': total_pages(total, per_page),
    }


@log_timing("statistics")
def get_statistics(period: MonthPeriod, store: Optional[TransactionStore] = None) -> Dict[str, Any]:
    """Sold value and sold/not-sold counts for the month (zero-filled when empty)."""
    store = store or get_store()
    return store.filtered_totals(build_transaction_filters(period))


@log_timing("bar_chart")
def get_bar_chart(
    period: MonthPeriod,
    store: Optional[TransactionStore] = None,
    boundaries=PRICE_BUCKET_BOUNDARIES,
) -> List[Dict[str, Any]]:
    """Price-range histogram for the month."""
    store = store or get_store()
    return store.price_histogram(build_transaction_filters(period), boundaries)


@log_timing("pie_chart")
def get_pie_chart(period: MonthPeriod, store: Optional[TransactionStore] = None) -> List[Dict[str, Any]]:
    """Record count per category for the month."""
    store = store or get_store()
    return store.group_count(build_transaction_filters(period), 'category')


# ============================================================================
# COMBINED (FAN-OUT)
# ============================================================================

def _in_app_context(app, fn: Callable, *args, **kwargs):
    # Each worker gets its own app context, hence its own scoped session
    with app.app_context():
        return fn(*args, **kwargs)


@log_timing("combined")
def get_combined(
    period: MonthPeriod,
    search: Optional[str] = None,
    page: int = DEFAULT_PAGE,
    per_page: int = DEFAULT_PER_PAGE,
) -> Dict[str, Any]:
    """
    Listing, statistics, bar chart and pie chart for one month, queried concurrently.

    All four sections must succeed. If any section raises or the join times
    out, pending sections are cancelled and CombinedQueryError is raised.
    """
    app = current_app._get_current_object()
    max_workers = int(app.config.get('COMBINED_MAX_WORKERS', 4))
    timeout = float(app.config.get('COMBINED_TIMEOUT_SECONDS', 30))

    sections = {
        'transactions': (list_transactions, (period, search, page, per_page)),
        'statistics': (get_statistics, (period,)),
        'barChart': (get_bar_chart, (period,)),
        'pieChart': (get_pie_chart, (period,)),
    }

    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='combined')
    try:
        futures = {
            executor.submit(_in_app_context, app, fn, *args): name
            for name, (fn, args) in sections.items()
        }
        done, pending = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)

        for future in done:
            error = future.exception()
            if error is not None:
                for other in pending:
                    other.cancel()
                raise CombinedQueryError(futures[future], error) from error

        if pending:
            for other in pending:
                other.cancel()
            slow = sorted(futures[f] for f in pending)
            raise CombinedQueryError(','.join(slow), TimeoutError(f"no result after {timeout}s"))

        results = {futures[f]: f.result() for f in done}
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return {name: results[name] for name in sections}
