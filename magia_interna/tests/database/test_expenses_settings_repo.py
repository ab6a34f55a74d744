import pytest

from magia_interna.constants import DEFAULT_PROMO_LINK
from magia_interna.database.repositories.errors import DomainError
from magia_interna.database.repositories.expenses_repo import Expense, ExpensesRepo
from magia_interna.database.repositories.settings_repo import SettingsRepo


def _expense(**kw) -> Expense:
    base = dict(expense_id=None, description="Arriendo local", amount=1500000,
                category="Alquiler", payment_method="transferencia", expense_date="2025-03-01")
    base.update(kw)
    return Expense(**base)


def test_expense_crud(conn):
    repo = ExpensesRepo(conn)
    eid = repo.create_expense(_expense())
    e = repo.get_expense(eid)
    assert e.amount == pytest.approx(1500000)

    e.amount = 1600000
    e.notes = "  incremento anual "
    repo.update_expense(e)
    e = repo.get_expense(eid)
    assert e.amount == pytest.approx(1600000)
    assert e.notes == "incremento anual"

    repo.delete_expense(eid)
    assert repo.get_expense(eid) is None


@pytest.mark.parametrize(
    "kw",
    [
        {"description": "  "},
        {"amount": -10},
        {"category": "Viajes"},
        {"payment_method": "cheque"},
    ],
)
def test_invalid_expense(conn, kw):
    with pytest.raises(DomainError):
        ExpensesRepo(conn).create_expense(_expense(**kw))


def test_search_and_totals(conn):
    repo = ExpensesRepo(conn)
    repo.create_expense(_expense())
    repo.create_expense(_expense(description="Publicidad redes", amount=200000,
                                 category="Marketing", expense_date="2025-03-15"))
    repo.create_expense(_expense(description="Bolsas", amount=50000,
                                 category="Suministros", expense_date="2025-04-02"))

    assert [e.description for e in repo.search_expenses("market")] == ["Publicidad redes"]
    assert len(repo.search_expenses(date_from="2025-03-01", date_to="2025-03-31")) == 2
    assert repo.total_between("2025-03-01", "2025-03-31") == pytest.approx(1700000)
    by_cat = repo.total_by_category("2025-03-01", "2025-03-31")
    assert [r["category"] for r in by_cat] == ["Alquiler", "Marketing"]


def test_settings_defaults_are_seeded(conn):
    s = SettingsRepo(conn).get_all()
    assert s["currency"] == "COP"
    assert s["low_stock_alerts"] is True
    assert s["default_low_stock_threshold"] == 5
    assert s["promo_link"] == DEFAULT_PROMO_LINK


def test_settings_save_and_reset(conn):
    repo = SettingsRepo(conn)
    repo.save({"company_name": "Magia Interna Centro", "low_stock_alerts": False,
               "default_low_stock_threshold": 8})
    assert repo.get("company_name") == "Magia Interna Centro"
    assert repo.get("low_stock_alerts") is False
    assert repo.get("default_low_stock_threshold") == 8

    repo.reset()
    assert repo.get("low_stock_alerts") is True
    assert repo.get("default_low_stock_threshold") == 5


def test_settings_reject_unknown_keys_and_negative_threshold(conn):
    repo = SettingsRepo(conn)
    with pytest.raises(DomainError):
        repo.save({"theme": "dark"})
    with pytest.raises(DomainError):
        repo.save({"default_low_stock_threshold": -1})
