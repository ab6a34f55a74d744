"""
Assembles everything the Analytics screen shows for one period.

The period is a whole year or one month of it. Monthly buckets always
cover the twelve months of the year; weekly and daily buckets cover the
selected period.
"""
from __future__ import annotations

import calendar
import sqlite3
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from ...constants import LOW_STOCK_THRESHOLD
from ...database.repositories.analytics_repo import AnalyticsRepo
from ...database.repositories.customers_repo import CustomersRepo
from ...database.repositories.expenses_repo import ExpensesRepo
from . import aggregations as agg

MODES = ("month", "week", "day")


def period_bounds(year: int, month: Optional[int] = None) -> tuple[date, date]:
    if month is None:
        return date(year, 1, 1), date(year, 12, 31)
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


@dataclass
class AnalyticsReport:
    year: int
    month: Optional[int]
    mode: str
    kpis: Dict[str, float] = field(default_factory=dict)
    buckets: List[agg.Bucket] = field(default_factory=list)
    units_by_category: Dict[str, List[int]] = field(default_factory=dict)
    payment_share: List[Dict[str, Any]] = field(default_factory=list)
    expenses_by_category: List[Dict[str, Any]] = field(default_factory=list)
    customer_types: Dict[str, int] = field(default_factory=dict)
    products_by_category: List[Dict[str, Any]] = field(default_factory=list)


def build_report(
    conn: sqlite3.Connection,
    year: int,
    month: Optional[int] = None,
    mode: str = "month",
) -> AnalyticsReport:
    if mode not in MODES:
        raise ValueError(f"unknown bucket mode: {mode}")
    repo = AnalyticsRepo(conn)
    expenses = ExpensesRepo(conn)
    d_from, d_to = period_bounds(year, month)
    f_iso, t_iso = d_from.isoformat(), d_to.isoformat()

    sales = repo.sales_with_items(f_iso, t_iso)
    t = agg.totals(sales)
    spent = expenses.total_between(f_iso, t_iso)

    report = AnalyticsReport(year=year, month=month, mode=mode)
    report.kpis = {
        "net_sales": t["revenue"],
        "delivery_fees": t["delivery_fees"],
        "cost": t["cost"],
        "profit": t["profit"],
        "expenses": spent,
        "profit_after_expenses": t["profit"] - spent,
        "margin_pct": t["margin_pct"],
        "sale_count": t["count"],
        "product_count": repo.product_count(),
        "customer_count": repo.customer_count(),
        "low_stock_count": repo.low_stock_count(LOW_STOCK_THRESHOLD),
    }

    if mode == "month":
        year_sales = sales
        if month is not None:
            y_from, y_to = period_bounds(year)
            year_sales = repo.sales_with_items(y_from.isoformat(), y_to.isoformat())
        report.buckets = agg.by_month(year_sales, year)
    elif mode == "week":
        report.buckets = agg.by_week(sales, d_from, d_to)
    else:
        report.buckets = agg.by_day(sales, d_from, d_to)

    report.units_by_category = agg.units_by_category_per_month(sales, year)
    report.payment_share = agg.payment_method_share(sales)
    report.expenses_by_category = expenses.total_by_category(f_iso, t_iso)
    report.customer_types = CustomersRepo(conn).count_by_type()
    report.products_by_category = repo.products_by_category()
    return report
