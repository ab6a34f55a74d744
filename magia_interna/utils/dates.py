# utils/dates.py
"""
Date display and birth-date helpers.

All arithmetic is date-only (no times, no timezones): a birthday that
falls today is 0 days away.
"""
from __future__ import annotations

import calendar
from datetime import date
from typing import Optional


def parse_birth_date(value: Optional[str]) -> Optional[date]:
    """'YYYY-MM-DD' -> date. Returns None for empty or malformed input."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def format_date_display(value: Optional[str]) -> str:
    """'YYYY-MM-DD' -> 'dd/mm/yyyy'; empty stays empty, unparseable text is shown as is."""
    if not value:
        return ""
    d = parse_birth_date(value)
    return d.strftime("%d/%m/%Y") if d else str(value)


def format_birth_date(value: Optional[str]) -> str:
    if not value:
        return "No especificada"
    d = parse_birth_date(value)
    if d is None:
        return "Fecha inválida"
    return d.strftime("%d/%m/%Y")


def _birthday_in_year(born: date, year: int) -> date:
    # Feb 29 birthdays are celebrated on Feb 28 in common years.
    if born.month == 2 and born.day == 29 and not calendar.isleap(year):
        return date(year, 2, 28)
    return date(year, born.month, born.day)


def calculate_age(value: Optional[str], today: Optional[date] = None) -> int:
    born = parse_birth_date(value)
    if born is None:
        return 0
    today = today or date.today()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def days_until_birthday(value: Optional[str], today: Optional[date] = None) -> int:
    born = parse_birth_date(value)
    if born is None:
        return 0
    today = today or date.today()
    nxt = _birthday_in_year(born, today.year)
    if nxt < today:
        nxt = _birthday_in_year(born, today.year + 1)
    return (nxt - today).days


def birthday_label(days: int) -> str:
    if days == 0:
        return "Hoy"
    if days == 1:
        return "Mañana"
    return f"En {days} días"
