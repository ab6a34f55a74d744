from datetime import date

import pytest

from magia_interna.utils.dates import (
    birthday_label,
    calculate_age,
    days_until_birthday,
    format_birth_date,
    format_date_display,
    parse_birth_date,
)


def test_parse_birth_date():
    assert parse_birth_date("1990-05-14") == date(1990, 5, 14)
    assert parse_birth_date("1990-05-14T00:00:00") == date(1990, 5, 14)
    assert parse_birth_date("14/05/1990") is None
    assert parse_birth_date("") is None


def test_format_birth_date():
    assert format_birth_date("1990-05-14") == "14/05/1990"
    assert format_birth_date(None) == "No especificada"
    assert format_birth_date("nope") == "Fecha inválida"


def test_format_date_display_is_neutral_for_missing_dates():
    assert format_date_display("2025-03-10") == "10/03/2025"
    assert format_date_display("2025-03-10 14:30:00") == "10/03/2025"
    assert format_date_display(None) == ""
    assert format_date_display("") == ""


def test_age_changes_on_the_birthday():
    assert calculate_age("1990-05-14", date(2025, 5, 13)) == 34
    assert calculate_age("1990-05-14", date(2025, 5, 14)) == 35
    assert calculate_age("garbage", date(2025, 5, 14)) == 0


def test_days_until_birthday():
    today = date(2025, 5, 10)
    assert days_until_birthday("1990-05-10", today) == 0
    assert days_until_birthday("1990-05-11", today) == 1
    assert days_until_birthday("1990-05-09", today) == 364
    assert days_until_birthday(None, today) == 0


def test_leap_day_birthday_in_common_year():
    assert days_until_birthday("2000-02-29", date(2025, 2, 27)) == 1
    assert calculate_age("2000-02-29", date(2025, 3, 1)) == 25


@pytest.mark.parametrize("days, label", [(0, "Hoy"), (1, "Mañana"), (2, "En 2 días"), (30, "En 30 días")])
def test_birthday_label(days, label):
    assert birthday_label(days) == label
