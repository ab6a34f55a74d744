from datetime import date
from types import SimpleNamespace

from magia_interna.modules.birthdays.logic import by_month, current_month, upcoming

TODAY = date(2025, 5, 10)

PEOPLE = [
    SimpleNamespace(name="Ana", birth_date="1990-05-14"),
    SimpleNamespace(name="Bea", birth_date="1985-05-11"),
    SimpleNamespace(name="Carla", birth_date="2000-05-10"),
    SimpleNamespace(name="Dan", birth_date="1970-12-25"),
    SimpleNamespace(name="Edu", birth_date="1999-06-09"),
    SimpleNamespace(name="Fabi", birth_date="1999-06-10"),
    SimpleNamespace(name="Gus", birth_date="no es fecha"),
    SimpleNamespace(name="Hugo", birth_date=None),
]


def test_grouped_by_month_with_spanish_names():
    groups = by_month(PEOPLE, TODAY)
    assert [(g.month, g.name) for g in groups] == [(5, "Mayo"), (6, "Junio"), (12, "Diciembre")]
    assert [e.customer.name for e in groups[0].entries] == ["Carla", "Bea", "Ana"]


def test_current_month_sorted_by_day():
    entries = current_month(PEOPLE, TODAY)
    assert [(e.customer.name, e.born.day) for e in entries] == [("Carla", 10), ("Bea", 11), ("Ana", 14)]
    assert entries[0].label == "Hoy"
    assert entries[0].age == 25


def test_upcoming_excludes_today_and_beyond_window():
    entries = upcoming(PEOPLE, TODAY)
    assert [(e.customer.name, e.days_until) for e in entries] == [("Bea", 1), ("Ana", 4), ("Edu", 30)]
    assert [e.label for e in entries] == ["Mañana", "En 4 días", "En 30 días"]


def test_upcoming_custom_window():
    assert [e.customer.name for e in upcoming(PEOPLE, TODAY, within=1)] == ["Bea"]


def test_invalid_dates_are_skipped():
    names = {e.customer.name for g in by_month(PEOPLE, TODAY) for e in g.entries}
    assert "Gus" not in names and "Hugo" not in names
