from datetime import date

import pytest

from magia_interna.modules.analytics import aggregations as agg

SALE_A = {
    "sale_id": 1, "sale_date": "2025-03-10", "payment_method": "efectivo",
    "total_amount": 106000, "delivery_fee": 3000, "discount_amount": 2000, "tax_amount": 5000,
    "items": [{"quantity": 2, "unit_cost": 20000, "category": "Blusas"}],
}
SALE_B = {
    "sale_id": 2, "sale_date": "2025-07-01 15:20:00", "payment_method": "tarjeta",
    "total_amount": 90000, "delivery_fee": 0, "discount_amount": 0, "tax_amount": 0,
    "items": [{"quantity": 1, "unit_cost": 40000, "category": "Vestidos"}],
}


def test_sale_profit_excludes_delivery_and_subtracts_cost_discount_tax():
    assert agg.sale_cost(SALE_A) == 40000
    assert agg.sale_profit(SALE_A) == pytest.approx((106000 - 3000) - 40000 - 2000 - 5000)
    assert agg.sale_profit(SALE_B) == pytest.approx(50000)


def test_totals_and_margin():
    t = agg.totals([SALE_A, SALE_B])
    assert t["revenue"] == pytest.approx(103000 + 90000)
    assert t["delivery_fees"] == pytest.approx(3000)
    assert t["profit"] == pytest.approx(56000 + 50000)
    assert t["count"] == 2
    assert t["margin_pct"] == pytest.approx(106000 / 193000 * 100)


def test_totals_with_no_sales():
    t = agg.totals([])
    assert t["revenue"] == 0
    assert t["margin_pct"] == 0


def test_monthly_buckets_are_zero_filled_and_sum_to_total():
    buckets = agg.by_month([SALE_A, SALE_B], 2025)
    assert len(buckets) == 12
    assert [b.label for b in buckets][:3] == ["ene", "feb", "mar"]
    assert buckets[2].profit == pytest.approx(56000)
    assert buckets[6].profit == pytest.approx(50000)
    assert buckets[0].revenue == 0
    assert sum(b.profit for b in buckets) == pytest.approx(agg.totals([SALE_A, SALE_B])["profit"])


def test_monthly_buckets_ignore_other_years():
    other = dict(SALE_B, sale_date="2024-07-01")
    assert sum(b.revenue for b in agg.by_month([other], 2025)) == 0


def test_weekly_and_daily_buckets_cover_range():
    days = agg.by_day([SALE_A], date(2025, 3, 1), date(2025, 3, 31))
    assert len(days) == 31
    assert days[9].label == "2025-03-10"
    assert days[9].profit == pytest.approx(56000)

    weeks = agg.by_week([SALE_A], date(2025, 3, 1), date(2025, 3, 31))
    assert weeks[0].label == "2025-W09"
    assert sum(w.profit for w in weeks) == pytest.approx(56000)


def test_units_by_category_per_month():
    out = agg.units_by_category_per_month([SALE_A, SALE_B], 2025)
    assert list(out) == ["Blusas", "Vestidos"]
    assert out["Blusas"][2] == 2
    assert out["Vestidos"][6] == 1
    assert sum(out["Blusas"]) == 2


def test_payment_share():
    share = agg.payment_method_share([SALE_A, SALE_B])
    by_method = {s["method"]: s for s in share}
    assert by_method["efectivo"]["percent"] == 50
    assert by_method["tarjeta"]["percent"] == 50
    assert by_method["transferencia"]["count"] == 0
    assert abs(sum(s["percent"] for s in share) - 100) <= len(share)


def test_payment_share_without_sales_is_all_zero():
    share = agg.payment_method_share([])
    assert len(share) == 3
    assert all(s["percent"] == 0 for s in share)


def test_percent_guards_division_by_zero():
    assert agg.percent(5, 0) == 0
    assert agg.percent(1, 4) == 25
