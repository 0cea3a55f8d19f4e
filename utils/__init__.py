"""
Utils package - Utility functions and helpers
"""

from .helpers import (
    CustomJSONEncoder,
    coerce_amount,
    day_key,
    format_currency,
    new_id,
    normalize_date_text,
    parse_iso_datetime,
    today_iso,
)

__all__ = [
    'CustomJSONEncoder',
    'coerce_amount',
    'day_key',
    'format_currency',
    'new_id',
    'normalize_date_text',
    'parse_iso_datetime',
    'today_iso',
]
