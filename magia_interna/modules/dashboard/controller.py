# magia_interna/modules/dashboard/controller.py
from __future__ import annotations

import logging
import sqlite3

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from .model import load_snapshot
from .view import DashboardView

_log = logging.getLogger(__name__)


class DashboardController(BaseModule):
    """
    Coordinates load_snapshot() <-> DashboardView and emits navigation intents.

    Signals the MainWindow hooks:
      - open_create_sale(): go to the sales screen
      - navigate(target): go to another screen ("Productos", "Clientes", ...)
    """

    open_create_sale = Signal()
    navigate = Signal(str)

    _KPI_TARGETS = {
        "net_sales": "Ventas",
        "sale_count": "Ventas",
        "units_in_stock": "Productos",
        "active_customers": "Clientes",
    }

    def __init__(self, conn: sqlite3.Connection) -> None:
        super().__init__()
        self.conn = conn
        self.view = DashboardView()
        self.view.create_sale_requested.connect(self.open_create_sale)
        self.view.kpi_clicked.connect(self._on_kpi_clicked)
        self.refresh()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        try:
            snap = load_snapshot(self.conn)
        except sqlite3.Error as e:
            self._handle_error("No se pudo cargar el dashboard", e)
            return
        self.view.set_kpis(
            net_sales=snap.net_sales,
            units_in_stock=snap.units_in_stock,
            active_customers=snap.active_customers,
            sale_count=snap.sale_count,
        )
        self.view.set_top_products(snap.top_products)
        self.view.set_alerts(snap.alerts)
        _log.debug("Dashboard refreshed for %s", snap.day)

    def _on_kpi_clicked(self, key: str) -> None:
        target = self._KPI_TARGETS.get(key)
        if target:
            self.navigate.emit(target)
