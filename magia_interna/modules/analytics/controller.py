from __future__ import annotations

import logging
import sqlite3
from datetime import date

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from .report import AnalyticsReport, build_report
from .view import AnalyticsView
from ...constants import CUSTOMER_TYPES, PAYMENT_METHODS
from ...database.repositories.analytics_repo import AnalyticsRepo
from ...utils.helpers import fmt_cop

_log = logging.getLogger(__name__)

_MONEY_KPIS = ("net_sales", "delivery_fees", "profit", "expenses", "profit_after_expenses")
_COUNT_KPIS = ("product_count", "customer_count", "low_stock_count")


class AnalyticsController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = AnalyticsRepo(conn)
        self.view = AnalyticsView()
        self.report: AnalyticsReport | None = None

        self._load_years()
        self.view.cmb_year.currentIndexChanged.connect(lambda _=None: self._reload())
        self.view.cmb_month.currentIndexChanged.connect(lambda _=None: self._reload())
        self.view.cmb_mode.currentIndexChanged.connect(lambda _=None: self._reload())
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._load_years()
        self._reload()

    def _load_years(self) -> None:
        this_year = date.today().year
        years = sorted(set(self.repo.sale_years()) | {this_year}, reverse=True)
        self.view.set_years(years, self.view.year or this_year)

    def _reload(self) -> None:
        year = self.view.year or date.today().year
        try:
            self.report = build_report(self.conn, year, self.view.month, self.view.mode)
        except sqlite3.Error as e:
            self._handle_error("No se pudieron calcular las estadísticas", e)
            return
        self._render(self.report)

    def _render(self, r: AnalyticsReport) -> None:
        v = self.view
        for key in _MONEY_KPIS:
            v.set_kpi(key, fmt_cop(r.kpis[key]))
        for key in _COUNT_KPIS:
            v.set_kpi(key, str(int(r.kpis[key])))
        v.set_kpi("margin_pct", f"{r.kpis['margin_pct']:.1f}%")

        v.fill(
            v.tbl_buckets,
            ["Periodo", "Ventas", "Costo", "Ganancia"],
            [[b.label, fmt_cop(b.revenue), fmt_cop(b.cost), fmt_cop(b.profit)] for b in r.buckets],
        )
        v.fill(
            v.tbl_units,
            v.month_headers(),
            [[cat, *units, sum(units)] for cat, units in r.units_by_category.items()],
        )
        labels = dict(PAYMENT_METHODS)
        v.fill(
            v.tbl_payments,
            ["Método", "Ventas", "%"],
            [[labels.get(p["method"], p["method"]), p["count"], f"{p['percent']}%"] for p in r.payment_share],
        )
        v.fill(
            v.tbl_expenses,
            ["Categoría", "Total"],
            [[e["category"], fmt_cop(e["total_amount"])] for e in r.expenses_by_category],
        )
        types = dict(CUSTOMER_TYPES)
        v.fill(
            v.tbl_customers,
            ["Tipo", "Clientes"],
            [[types.get(k, k), n] for k, n in r.customer_types.items()],
        )
        v.fill(
            v.tbl_products,
            ["Categoría", "Productos"],
            [[p["category"], p["count"]] for p in r.products_by_category],
        )
        _log.debug("Analytics rendered for %s/%s (%s)", r.year, r.month, r.mode)
