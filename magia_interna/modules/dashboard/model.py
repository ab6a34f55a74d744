# magia_interna/modules/dashboard/model.py
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from ...constants import CRITICAL_STOCK_THRESHOLD
from ...database.repositories.analytics_repo import AnalyticsRepo
from ...database.repositories.customers_repo import CustomersRepo
from ...database.repositories.products_repo import ProductsRepo
from ...database.repositories.settings_repo import SettingsRepo


def alert_level(stock_quantity: int) -> str:
    """'critical' below CRITICAL_STOCK_THRESHOLD units, 'warning' otherwise."""
    return "critical" if int(stock_quantity) < CRITICAL_STOCK_THRESHOLD else "warning"


@dataclass
class DashboardSnapshot:
    day: str
    net_sales: float = 0.0
    sale_count: int = 0
    units_in_stock: int = 0
    active_customers: int = 0
    top_products: List[Dict[str, Any]] = field(default_factory=list)
    alerts: List[Dict[str, Any]] = field(default_factory=list)


def load_snapshot(conn: sqlite3.Connection, day: Optional[date] = None, top_n: int = 5) -> DashboardSnapshot:
    """
    Figures for the home screen on `day` (default today). Net sales exclude
    delivery fees and cancelled sales. Low-stock alerts honour the
    `low_stock_alerts` and `default_low_stock_threshold` settings.
    """
    iso = (day or date.today()).isoformat()
    analytics = AnalyticsRepo(conn)
    products = ProductsRepo(conn)
    settings = SettingsRepo(conn).get_all()

    snap = DashboardSnapshot(
        day=iso,
        net_sales=analytics.net_sales(iso, iso),
        sale_count=analytics.sale_count(iso, iso),
        units_in_stock=products.units_in_stock(),
        active_customers=CustomersRepo(conn).count_active(),
        top_products=analytics.top_products(iso[:4] + "-01-01", iso, top_n),
    )
    if settings.get("low_stock_alerts", True):
        for p in products.low_stock(settings.get("default_low_stock_threshold")):
            snap.alerts.append(
                {
                    "product_id": p.product_id,
                    "product_name": p.name,
                    "sku": p.sku,
                    "stock_quantity": p.stock_quantity,
                    "level": alert_level(p.stock_quantity),
                }
            )
    return snap
