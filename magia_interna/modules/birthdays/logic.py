"""
Birthday grouping for the Cumpleaños screen.

Works on any objects with `name` and `birth_date` ('YYYY-MM-DD')
attributes; rows with a missing or malformed birth date are skipped.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from ...constants import MONTH_NAMES_ES, UPCOMING_BIRTHDAY_DAYS
from ...utils.dates import birthday_label, calculate_age, days_until_birthday, parse_birth_date


@dataclass
class BirthdayEntry:
    customer: object
    born: date
    age: int
    days_until: int

    @property
    def label(self) -> str:
        return birthday_label(self.days_until)


@dataclass
class MonthGroup:
    month: int
    name: str
    entries: List[BirthdayEntry]


def _entries(customers: Iterable, today: date) -> List[BirthdayEntry]:
    out = []
    for c in customers:
        born = parse_birth_date(getattr(c, "birth_date", None))
        if born is None:
            continue
        out.append(
            BirthdayEntry(
                customer=c,
                born=born,
                age=calculate_age(born, today),
                days_until=days_until_birthday(born, today),
            )
        )
    return out


def by_month(customers: Iterable, today: Optional[date] = None) -> List[MonthGroup]:
    """Months that have at least one birthday, January first; entries ordered by day then name."""
    today = today or date.today()
    groups: dict[int, List[BirthdayEntry]] = {}
    for e in _entries(customers, today):
        groups.setdefault(e.born.month, []).append(e)
    return [
        MonthGroup(m, MONTH_NAMES_ES[m - 1], sorted(groups[m], key=lambda e: (e.born.day, e.customer.name)))
        for m in sorted(groups)
    ]


def current_month(customers: Iterable, today: Optional[date] = None) -> List[BirthdayEntry]:
    today = today or date.today()
    return sorted(
        (e for e in _entries(customers, today) if e.born.month == today.month),
        key=lambda e: (e.born.day, e.customer.name),
    )


def upcoming(
    customers: Iterable,
    today: Optional[date] = None,
    within: int = UPCOMING_BIRTHDAY_DAYS,
) -> List[BirthdayEntry]:
    """Birthdays 1..`within` days ahead, soonest first. Today's birthdays are not upcoming."""
    today = today or date.today()
    return sorted(
        (e for e in _entries(customers, today) if 0 < e.days_until <= within),
        key=lambda e: (e.days_until, e.customer.name),
    )
