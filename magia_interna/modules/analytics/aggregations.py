# magia_interna/modules/analytics/aggregations.py
"""
Profit aggregation over persisted sales.

Input is what AnalyticsRepo.sales_with_items() returns: one dict per
completed sale with total_amount, delivery_fee, discount_amount,
tax_amount, sale_date, payment_method and an "items" list carrying
quantity, unit_cost and category.

Per sale:
    total_cost  = Σ quantity × unit_cost
    net_revenue = total_amount − delivery_fee
    profit      = net_revenue − total_cost − discount_amount − tax_amount

Buckets cover every month/week/day of the requested range, zero-filled,
so bucket sums always equal the unbucketed totals.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ...constants import MONTH_ABBR_ES, PAYMENT_METHODS
from ...utils.helpers import format_date_for_input, to_float


@dataclass
class SaleFigures:
    sale_id: Optional[int]
    sale_date: date
    revenue: float
    cost: float
    profit: float
    delivery_fee: float


@dataclass
class Bucket:
    label: str
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0

    def add(self, f: SaleFigures) -> None:
        self.revenue += f.revenue
        self.cost += f.cost
        self.profit += f.profit


def percent(part: float, whole: float) -> float:
    """part / whole × 100, or 0 when whole is 0."""
    if not whole:
        return 0.0
    return part / whole * 100.0


def margin_pct(profit: float, revenue: float) -> float:
    return percent(profit, revenue)


# ---------------------------------------------------------------------------
# Per-sale figures
# ---------------------------------------------------------------------------

def sale_cost(sale: Mapping) -> float:
    return sum(
        to_float(it.get("quantity")) * to_float(it.get("unit_cost"))
        for it in sale.get("items") or ()
    )


def sale_profit(sale: Mapping) -> float:
    net_revenue = to_float(sale.get("total_amount")) - to_float(sale.get("delivery_fee"))
    return (
        net_revenue
        - sale_cost(sale)
        - to_float(sale.get("discount_amount"))
        - to_float(sale.get("tax_amount"))
    )


def sale_figures(sale: Mapping) -> SaleFigures:
    revenue = to_float(sale.get("total_amount")) - to_float(sale.get("delivery_fee"))
    cost = sale_cost(sale)
    return SaleFigures(
        sale_id=sale.get("sale_id"),
        sale_date=date.fromisoformat(format_date_for_input(sale["sale_date"])),
        revenue=revenue,
        cost=cost,
        profit=sale_profit(sale),
        delivery_fee=to_float(sale.get("delivery_fee")),
    )


def totals(sales: Iterable[Mapping]) -> Dict[str, float]:
    """Unbucketed revenue/cost/profit/delivery and margin over `sales`."""
    out = {"revenue": 0.0, "cost": 0.0, "profit": 0.0, "delivery_fees": 0.0, "count": 0}
    for s in sales:
        f = sale_figures(s)
        out["revenue"] += f.revenue
        out["cost"] += f.cost
        out["profit"] += f.profit
        out["delivery_fees"] += f.delivery_fee
        out["count"] += 1
    out["margin_pct"] = margin_pct(out["profit"], out["revenue"])
    return out


# ---------------------------------------------------------------------------
# Time buckets
# ---------------------------------------------------------------------------

def _month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def _week_key(d: date) -> str:
    y, w, _ = d.isocalendar()
    return f"{y:04d}-W{w:02d}"


def _bucketize(sales: Iterable[Mapping], buckets: "OrderedDict[str, Bucket]", key_fn) -> List[Bucket]:
    for s in sales:
        f = sale_figures(s)
        b = buckets.get(key_fn(f.sale_date))
        if b is not None:
            b.add(f)
    return list(buckets.values())


def by_month(sales: Iterable[Mapping], year: int) -> List[Bucket]:
    """Exactly twelve buckets (Jan..Dec of `year`), labelled 'ene'..'dic'."""
    buckets: "OrderedDict[str, Bucket]" = OrderedDict(
        (f"{year:04d}-{m:02d}", Bucket(MONTH_ABBR_ES[m - 1])) for m in range(1, 13)
    )
    return _bucketize(sales, buckets, _month_key)


def by_week(sales: Iterable[Mapping], date_from: date, date_to: date) -> List[Bucket]:
    """One bucket per ISO week touching [date_from, date_to], labelled '2025-W07'."""
    buckets: "OrderedDict[str, Bucket]" = OrderedDict()
    d = date_from - timedelta(days=date_from.weekday())
    while d <= date_to:
        k = _week_key(d)
        buckets[k] = Bucket(k)
        d += timedelta(days=7)
    return _bucketize(sales, buckets, _week_key)


def by_day(sales: Iterable[Mapping], date_from: date, date_to: date) -> List[Bucket]:
    buckets: "OrderedDict[str, Bucket]" = OrderedDict()
    d = date_from
    while d <= date_to:
        buckets[d.isoformat()] = Bucket(d.isoformat())
        d += timedelta(days=1)
    return _bucketize(sales, buckets, date.isoformat)


# ---------------------------------------------------------------------------
# Category / payment method
# ---------------------------------------------------------------------------

def units_by_category_per_month(sales: Iterable[Mapping], year: int) -> Dict[str, List[int]]:
    """
    {category: [units Jan, ..., units Dec]} for `year`. Sales from other
    years are ignored; lines without a category go under 'Sin categoría'.
    """
    out: Dict[str, List[int]] = {}
    for s in sales:
        d = date.fromisoformat(format_date_for_input(s["sale_date"]))
        if d.year != year:
            continue
        for it in s.get("items") or ():
            cat = it.get("category") or "Sin categoría"
            row = out.setdefault(cat, [0] * 12)
            row[d.month - 1] += int(it.get("quantity") or 0)
    return dict(sorted(out.items()))


def payment_method_share(
    sales: Sequence[Mapping],
    methods: Optional[Sequence[str]] = None,
) -> List[Dict[str, object]]:
    """
    Sale count and rounded percentage per payment method.

    Every known method is listed (count 0 when unused); unknown methods
    found in the data are appended. With no sales all percentages are 0.
    """
    order = list(methods) if methods is not None else [k for k, _ in PAYMENT_METHODS]
    counts: Dict[str, int] = {m: 0 for m in order}
    for s in sales:
        m = s.get("payment_method") or "otro"
        if m not in counts:
            order.append(m)
            counts[m] = 0
        counts[m] += 1
    total = sum(counts.values())
    return [
        {"method": m, "count": counts[m], "percent": round(percent(counts[m], total))}
        for m in order
    ]
