import pytest

from magia_interna.database.repositories.expenses_repo import Expense, ExpensesRepo
from magia_interna.modules.analytics.report import build_report, period_bounds


@pytest.fixture()
def sales_2025(conn, ids, make_sale):
    make_sale([(ids["blusa"], 2, 50000)], ids["ana"], tax=5000, discount=2000, delivery=3000,
              sale_date="2025-03-10")
    make_sale([(ids["vestido"], 1, 90000)], ids["luis"], payment_method="tarjeta",
              sale_date="2025-07-01")
    ExpensesRepo(conn).create_expense(Expense(None, "Arriendo", 30000, "Alquiler",
                                              "efectivo", "2025-03-05"))
    return ids


def test_period_bounds():
    assert [d.isoformat() for d in period_bounds(2024)] == ["2024-01-01", "2024-12-31"]
    assert [d.isoformat() for d in period_bounds(2024, 2)] == ["2024-02-01", "2024-02-29"]


def test_year_report_kpis(conn, sales_2025):
    r = build_report(conn, 2025)
    k = r.kpis
    assert k["net_sales"] == pytest.approx(103000 + 90000)
    assert k["delivery_fees"] == pytest.approx(3000)
    assert k["profit"] == pytest.approx(56000 + 50000)
    assert k["expenses"] == pytest.approx(30000)
    assert k["profit_after_expenses"] == pytest.approx(76000)
    assert k["sale_count"] == 2
    assert k["product_count"] == 3
    assert k["customer_count"] == 2
    assert k["low_stock_count"] == 1
    assert len(r.buckets) == 12
    assert {s["method"]: s["count"] for s in r.payment_share}["tarjeta"] == 1
    assert r.customer_types == {"regular": 1, "vip": 1}


def test_month_report_keeps_yearly_buckets(conn, sales_2025):
    r = build_report(conn, 2025, month=3)
    assert r.kpis["sale_count"] == 1
    assert len(r.buckets) == 12
    assert r.buckets[6].profit == pytest.approx(50000)
    assert [e["category"] for e in r.expenses_by_category] == ["Alquiler"]


def test_daily_mode_covers_the_month(conn, sales_2025):
    r = build_report(conn, 2025, month=3, mode="day")
    assert len(r.buckets) == 31
    assert sum(b.profit for b in r.buckets) == pytest.approx(r.kpis["profit"])


def test_cancelled_sales_do_not_count(conn, ids, make_sale):
    from magia_interna.database.repositories.sales_repo import SalesRepo

    sid = make_sale([(ids["blusa"], 1, 50000)], ids["ana"], sale_date="2025-05-05")
    SalesRepo(conn).cancel_sale(sid)
    assert build_report(conn, 2025).kpis["sale_count"] == 0


def test_unknown_mode(conn):
    with pytest.raises(ValueError):
        build_report(conn, 2025, mode="quarter")
