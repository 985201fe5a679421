from datetime import date
from decimal import Decimal

import pytest

from cleanadmin.core.errors import ValidationError
from cleanadmin.core.numbers import quantize, to_decimal
from cleanadmin.core.weeks import parse_week_date, week_end, week_label, week_start


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2025, 1, 6), date(2025, 1, 6)),
        (date(2025, 1, 9), date(2025, 1, 6)),
        (date(2025, 1, 12), date(2025, 1, 6)),
        (date(2025, 1, 13), date(2025, 1, 13)),
    ],
)
def test_week_start_is_monday(day, expected):
    assert week_start(day) == expected


def test_week_end_is_sunday():
    assert week_end(date(2025, 1, 6)) == date(2025, 1, 12)


def test_parse_week_date_accepts_dates_and_timestamps():
    assert parse_week_date("2025-01-09") == date(2025, 1, 9)
    assert parse_week_date("2025-01-09T18:30:00Z") == date(2025, 1, 9)
    assert parse_week_date(date(2025, 1, 9)) == date(2025, 1, 9)


@pytest.mark.parametrize("value", ["", "09/01/2025", "not-a-date", "2025-13-01"])
def test_parse_week_date_rejects_garbage(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_week_date(value)

    assert exc_info.value.message.startswith("Invalid date")


def test_week_label():
    assert week_label(date(2025, 1, 6)) == "Week of 2025-01-06 - 2025-01-12"


def test_quantize_rounds_half_up_to_cents():
    assert quantize("2.005") == Decimal("2.01")
    assert quantize(28.5 * 3) == Decimal("85.50")
    assert quantize(None) == Decimal("0.00")
    assert to_decimal(0.1) == Decimal("0.1")
