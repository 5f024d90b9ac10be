"""
Aggregation Service - Statement builders for the month dashboard

Three independent aggregations, each restricted by the same filter
conditions (see utils/filter_builder.py):

- totals:           sum(price) over sold rows, sold / not-sold counts
- price histogram:  fixed boundaries, lower-inclusive / upper-exclusive
- group count:      count per distinct value of a column

All builders are pure (no I/O). They return SQLAlchemy Select statements; the
store executes them and passes rows back through the shape_* helpers.

Usage:
    from services.aggregation_service import build_totals_query, shape_totals

    stmt = build_totals_query(conditions)
    row = db.session.execute(stmt).one()
    totals = shape_totals(row)
"""

import math
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import case, func, select

from constants import DEFAULT_BUCKET_ID, PRICE_BUCKET_BOUNDARIES

# SQL-side sentinel for the default bucket (CASE branches must share a type)
_DEFAULT_BUCKET_SQL = -1

ZERO_TOTALS = {'totalSales': 0, 'totalSold': 0, 'totalNotSold': 0}


# =============================================================================
# BOUNDARIES
# =============================================================================

def validate_boundaries(boundaries: Sequence[float]) -> List[float]:
    """
    Check that boundaries are strictly increasing with at least two entries.

    Only the last boundary may be +inf (open-ended bucket).
    """
    values = list(boundaries)
    if len(values) < 2:
        raise ValueError("boundaries must contain at least two values")
    for i, value in enumerate(values):
        if isinstance(value, float) and math.isnan(value):
            raise ValueError("boundaries must not contain NaN")
        if math.isinf(value) and (value < 0 or i != len(values) - 1):
            raise ValueError("only the last boundary may be infinite")
    for lower, upper in zip(values, values[1:]):
        if not lower < upper:
            raise ValueError(f"boundaries must be strictly increasing: {lower} >= {upper}")
    return values


def _bound(value: float):
    """Render a finite boundary as int when it is integral (0 instead of 0.0)."""
    if math.isinf(value):
        return None
    return int(value) if float(value).is_integer() else value


def describe_bucket(bucket_id: Any, boundaries: Sequence[float] = PRICE_BUCKET_BOUNDARIES) -> Dict[str, Any]:
    """
    Bucket identity for a histogram entry.

    describe_bucket(100) -> {'_id': 100, 'min': 100, 'max': 200, 'label': '100-200'}
    describe_bucket(900) -> {'_id': 900, 'min': 900, 'max': None, 'label': '900-above'}
    """
    if bucket_id == DEFAULT_BUCKET_ID:
        return {'_id': DEFAULT_BUCKET_ID, 'min': None, 'max': None, 'label': DEFAULT_BUCKET_ID}

    values = list(boundaries)
    for lower, upper in zip(values, values[1:]):
        if _bound(lower) == bucket_id:
            lo = _bound(lower)
            hi = _bound(upper)
            label = f"{lo}-above" if hi is None else f"{lo}-{hi}"
            return {'_id': lo, 'min': lo, 'max': hi, 'label': label}
    raise ValueError(f"{bucket_id!r} is not a lower bound of {values}")


def bucket_for_value(value: float, boundaries: Sequence[float] = PRICE_BUCKET_BOUNDARIES) -> Any:
    """
    Python-side bucket lookup with the same semantics as the SQL expression.

    Not used when serving requests; the test suite uses it as the reference
    that build_histogram_query results are checked against.
    """
    values = list(boundaries)
    for lower, upper in zip(values, values[1:]):
        if lower <= value < upper:
            return _bound(lower)
    return DEFAULT_BUCKET_ID


# =============================================================================
# STATEMENT BUILDERS
# =============================================================================

def build_totals_query(conditions: Iterable[Any]):
    """Single-row summary: totalSales, totalSold, totalNotSold."""
    from models.transaction import Transaction

    is_sold = Transaction.sold.is_(True)
    return select(
        func.coalesce(func.sum(case((is_sold, Transaction.price), else_=0)), 0).label('total_sales'),
        func.coalesce(func.sum(case((is_sold, 1), else_=0)), 0).label('total_sold'),
        func.coalesce(func.sum(case((is_sold, 0), else_=1)), 0).label('total_not_sold'),
    ).where(*conditions)


def build_bucket_expression(column, boundaries: Sequence[float] = PRICE_BUCKET_BOUNDARIES):
    """
    CASE expression mapping `column` to the lower bound of its bucket.

    Values below the first boundary (or at/above a finite last boundary)
    map to the default bucket sentinel.
    """
    values = validate_boundaries(boundaries)

    whens = [(column < values[0], _DEFAULT_BUCKET_SQL)]
    for lower, upper in zip(values, values[1:]):
        if math.isinf(upper):
            whens.append((column >= lower, _bound(lower)))
        else:
            whens.append((column < upper, _bound(lower)))
    return case(*whens, else_=_DEFAULT_BUCKET_SQL)


def build_histogram_query(conditions: Iterable[Any], boundaries: Sequence[float] = PRICE_BUCKET_BOUNDARIES):
    """Count per price bucket; only non-empty buckets produce rows."""
    from models.transaction import Transaction

    bucketed = select(
        build_bucket_expression(Transaction.price, boundaries).label('bucket')
    ).where(*conditions).subquery()

    return (
        select(bucketed.c.bucket, func.count().label('count'))
        .group_by(bucketed.c.bucket)
    )


def build_group_count_query(conditions: Iterable[Any], column):
    """Count per distinct value of `column`, largest groups first."""
    count = func.count().label('count')
    return (
        select(column.label('key'), count)
        .where(*conditions)
        .group_by(column)
        .order_by(count.desc(), column)
    )


# =============================================================================
# RESULT SHAPING
# =============================================================================

def shape_totals(row: Optional[Any]) -> Dict[str, Any]:
    """Map the totals row to the response shape; no row means zero-filled."""
    if row is None:
        return dict(ZERO_TOTALS)
    return {
        'totalSales': float(row.total_sales or 0),
        'totalSold': int(row.total_sold or 0),
        'totalNotSold': int(row.total_not_sold or 0),
    }


def shape_histogram(rows: Iterable[Any], boundaries: Sequence[float] = PRICE_BUCKET_BOUNDARIES) -> List[Dict[str, Any]]:
    """Histogram rows ordered by lower bound; the default bucket goes last."""
    entries = []
    default_entry = None
    for row in rows:
        if row.bucket == _DEFAULT_BUCKET_SQL:
            default_entry = {**describe_bucket(DEFAULT_BUCKET_ID), 'count': int(row.count)}
            continue
        entries.append({**describe_bucket(row.bucket, boundaries), 'count': int(row.count)})

    entries.sort(key=lambda e: e['min'])
    if default_entry is not None:
        entries.append(default_entry)
    return entries


def shape_group_counts(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    return [{'_id': row.key, 'count': int(row.count)} for row in rows]
