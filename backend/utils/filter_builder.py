"""
Filter builder utilities.

Provides a single source of truth for transaction filter handling across
every endpoint. Month scoping always goes through the resolved half-open
period; there is no second date-matching mechanism.
"""

from typing import Any, List, Optional

from sqlalchemy import or_

from utils.normalize import ValidationError, to_float
from utils.period import MonthPeriod


def parse_numeric_search(search: Optional[str]) -> Optional[float]:
    """
    Return search text as a float if it is a finite number, else None.

    "250" -> 250.0, "12.5" -> 12.5, "abc" -> None, "nan" -> None
    """
    if search is None:
        return None
    try:
        return to_float(str(search).strip())
    except ValidationError:
        return None


def build_period_filters(period: MonthPeriod) -> List[Any]:
    """Conditions restricting date_of_sale to [period.start, period.end)."""
    from models.transaction import Transaction

    return [
        Transaction.date_of_sale >= period.start,
        Transaction.date_of_sale < period.end,
    ]


def build_search_filter(search: Optional[str]) -> Optional[Any]:
    """
    OR-condition for free-text search, or None when search is empty.

    Matches title or description (case-insensitive, literal substring) and,
    when the text is numeric, price by exact equality.
    """
    from models.transaction import Transaction

    if search is None:
        return None
    text = str(search).strip()
    if not text:
        return None

    clauses = [
        Transaction.title.icontains(text, autoescape=True),
        Transaction.description.icontains(text, autoescape=True),
    ]
    numeric = parse_numeric_search(text)
    if numeric is not None:
        clauses.append(Transaction.price == numeric)
    return or_(*clauses)


def build_transaction_filters(
    period: MonthPeriod,
    search: Optional[str] = None,
) -> List[Any]:
    """
    Build SQLAlchemy filter conditions for a month, with optional search.

    Returns:
        List of SQLAlchemy conditions to be combined with and_().
    """
    conditions = build_period_filters(period)
    search_clause = build_search_filter(search)
    if search_clause is not None:
        conditions.append(search_clause)
    return conditions
