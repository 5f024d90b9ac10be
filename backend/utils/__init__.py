"""
Utility modules for the backend.
"""
from .normalize import ValidationError, to_int, to_float, to_str
from .period import InvalidPeriodError, MonthPeriod, resolve_month_period

__all__ = [
    'ValidationError',
    'to_int',
    'to_float',
    'to_str',
    'InvalidPeriodError',
    'MonthPeriod',
    'resolve_month_period',
]
