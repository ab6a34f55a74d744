from datetime import date

import pytest

from magia_interna.utils.helpers import (
    fmt_cop,
    format_date_for_input,
    format_input_for_display,
    month_bounds,
    parse_cop,
    to_float,
)
from magia_interna.utils.validators import looks_like_email, name_too_long, non_empty


@pytest.mark.parametrize(
    "value, text",
    [
        (129000, "$129.000"),
        (0, "$0"),
        (1234.5, "$1.235"),
        (-1000, "-$1.000"),
        ("2500000", "$2.500.000"),
    ],
)
def test_fmt_cop(value, text):
    assert fmt_cop(value) == text


def test_fmt_cop_unparseable():
    assert fmt_cop("n/a") == "n/a"
    assert fmt_cop(None, sentinel="-") == "-"


@pytest.mark.parametrize(
    "text, value",
    [("$129.000", 129000.0), ("129.000", 129000.0), ("1.234,5", 1234.5), ("", 0.0), (None, 0.0), ("abc", 0.0)],
)
def test_parse_cop(text, value):
    assert parse_cop(text) == value


def test_typed_amount_is_reformatted():
    assert format_input_for_display("12a34") == "$1.234"
    assert format_input_for_display("$") == ""


def test_format_date_for_input():
    assert format_date_for_input("2025-03-01 14:22:05") == "2025-03-01"
    assert format_date_for_input("2025-03-01T08:00:00") == "2025-03-01"
    assert format_date_for_input(date(2025, 1, 2)) == "2025-01-02"
    assert format_date_for_input(None) == ""


def test_month_bounds():
    assert month_bounds(date(2024, 2, 10)) == ("2024-02-01", "2024-02-29")
    assert month_bounds(date(2025, 12, 31)) == ("2025-12-01", "2025-12-31")


def test_to_float():
    assert to_float("3.5") == 3.5
    assert to_float(None, 7.0) == 7.0


def test_validators():
    assert non_empty("  x ")
    assert not non_empty("   ")
    assert name_too_long("x" * 61)
    assert not name_too_long("x" * 60)
    assert looks_like_email("ana@example.com")
    assert not looks_like_email("ana@example")
    assert not looks_like_email("")
