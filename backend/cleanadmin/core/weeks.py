"""Week arithmetic. Weekly data is keyed by the Monday of its ISO week."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from cleanadmin.core.errors import ValidationError


def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())


def week_end(start: date) -> date:
    return start + timedelta(days=6)


def parse_week_date(value: str | date) -> date:
    """Parse ``YYYY-MM-DD`` (or an ISO datetime) into a date.

    Raises ``ValidationError`` for anything else; the result is not normalised.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    try:
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}", {"expected": "YYYY-MM-DD"}) from None


def week_label(start: date) -> str:
    return f"Week of {start.isoformat()} - {week_end(start).isoformat()}"
