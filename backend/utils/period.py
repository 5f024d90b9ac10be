"""
Month period resolution.

Turns a (year, month) selector into the canonical half-open interval used by
every month-scoped query:

    WHERE date_of_sale >= :start AND date_of_sale < :end

RULE: Always use the exclusive upper bound. `end` is the first instant of the
following month, never the last day of the current one.

Usage:
    from utils.period import resolve_month_period, InvalidPeriodError

    period = resolve_month_period("3", year=2022)
    period.start  # datetime(2022, 3, 1, 0, 0)
    period.end    # datetime(2022, 4, 1, 0, 0)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from constants import MIN_MONTH, MAX_MONTH, MIN_YEAR, MAX_YEAR
from utils.normalize import ValidationError, to_int


class InvalidPeriodError(ValidationError):
    """Raised when a month/year selector does not name a real calendar month."""


@dataclass(frozen=True)
class MonthPeriod:
    """Half-open [start, end) interval covering one calendar month (naive UTC)."""
    year: int
    month: int
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def to_dict(self):
        return {
            'year': self.year,
            'month': self.month,
            'start': self.start.isoformat() + 'Z',
            'end': self.end.isoformat() + 'Z',
        }


def resolve_month_period(
    month: Union[int, str, None],
    year: Union[int, str, None] = None,
    *,
    default_year: Optional[int] = None,
) -> MonthPeriod:
    """
    Resolve a month selector to its half-open interval.

    Args:
        month: 1-12, as int or numeric string (e.g. 3, "3", "03")
        year: explicit year; falls back to default_year, then the app's
              DEFAULT_SALES_YEAR
        default_year: reference year used when `year` is omitted

    Raises:
        InvalidPeriodError: if month is missing, non-numeric, or outside
            1-12, or if the year is outside 1-9999
    """
    try:
        month_num = to_int(month, minimum=MIN_MONTH, maximum=MAX_MONTH, field='month')
        year_num = to_int(year, minimum=MIN_YEAR, maximum=MAX_YEAR, field='year')
    except ValidationError as e:
        raise InvalidPeriodError(str(e), field=e.field, received_value=e.received_value)

    if month_num is None:
        raise InvalidPeriodError("month is required (1-12)", field='month')

    if year_num is None:
        year_num = default_year if default_year is not None else _configured_year()

    start = datetime(year_num, month_num, 1)
    if year_num == MAX_YEAR and month_num == MAX_MONTH:
        raise InvalidPeriodError(
            f"Period {year_num:04d}-{month_num:02d} has no representable end",
            field='year',
            received_value=year,
        )
    end = start + relativedelta(months=1)
    return MonthPeriod(year=year_num, month=month_num, start=start, end=end)


def _configured_year() -> int:
    from flask import current_app, has_app_context
    from config import Config

    if has_app_context():
        return int(current_app.config.get('DEFAULT_SALES_YEAR', Config.DEFAULT_SALES_YEAR))
    return Config.DEFAULT_SALES_YEAR
