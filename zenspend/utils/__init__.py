"""
Utils package
"""

from .dates import add_months_clamped, days_in_month, iter_days, month_range, week_range

__all__ = [
    "add_months_clamped",
    "days_in_month",
    "iter_days",
    "month_range",
    "week_range",
]
