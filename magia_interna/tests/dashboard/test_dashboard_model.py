from datetime import date

import pytest

from magia_interna.database.repositories.settings_repo import SettingsRepo
from magia_interna.modules.dashboard.model import alert_level, load_snapshot

DAY = date(2025, 3, 10)


@pytest.mark.parametrize("stock, level", [(0, "critical"), (2, "critical"), (3, "warning"), (5, "warning")])
def test_alert_level(stock, level):
    assert alert_level(stock) == level


def test_snapshot_figures(conn, ids, make_sale):
    make_sale([(ids["blusa"], 2, 50000)], ids["ana"], delivery=3000, sale_date="2025-03-10")
    make_sale([(ids["jean"], 2, 120000)], ids["luis"], sale_date="2025-03-10")
    make_sale([(ids["vestido"], 1, 90000)], ids["luis"], sale_date="2025-03-09")

    snap = load_snapshot(conn, day=DAY)

    assert snap.net_sales == pytest.approx(100000 + 240000)
    assert snap.sale_count == 2
    assert snap.units_in_stock == 8 + 1 + 7
    assert snap.active_customers == 2
    assert [p["product_name"] for p in snap.top_products] == ["Jean Skinny", "Blusa Lino", "Vestido Floral"]
    assert [(a["sku"], a["level"]) for a in snap.alerts] == [("JN-01", "critical")]


def test_alerts_can_be_switched_off(conn, ids):
    SettingsRepo(conn).save({"low_stock_alerts": False})
    assert load_snapshot(conn, day=DAY).alerts == []


def test_alert_threshold_from_settings(conn, ids):
    SettingsRepo(conn).save({"default_low_stock_threshold": 8})
    alerts = load_snapshot(conn, day=DAY).alerts
    assert [(a["sku"], a["level"]) for a in alerts] == [("JN-01", "warning"), ("VS-01", "warning")]


def test_empty_database(conn):
    snap = load_snapshot(conn, day=DAY)
    assert snap.net_sales == 0
    assert snap.top_products == []
    assert snap.alerts == []
