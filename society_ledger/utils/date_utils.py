"""Date manipulation utilities"""

from datetime import date, datetime
from typing import Any, Optional, Tuple


def parse_optional_date(value: Any) -> Optional[date]:
    """
    Coerce a stored or submitted value to a date.

    Accepts date, datetime and ISO strings ("2024-03-31" or a full timestamp).
    Anything else, including unparsable strings, yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def month_bounds(month: str) -> Tuple[date, date]:
    """
    Return the first and last day of a "YYYY-MM" month.

    Raises:
        ValueError: If the month string is malformed
    """
    first = datetime.strptime(month, "%Y-%m").date()
    if first.month == 12:
        next_month = date(first.year + 1, 1, 1)
    else:
        next_month = date(first.year, first.month + 1, 1)
    return first, date.fromordinal(next_month.toordinal() - 1)
