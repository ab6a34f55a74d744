from __future__ import annotations

from typing import Dict, List

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QBrush, QColor, QStandardItem, QStandardItemModel
from PySide6.QtWidgets import (
    QAbstractItemView,
    QGridLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from ...utils.helpers import fmt_cop
from ...widgets.kpi_card import Card, KPICard
from ...widgets.table_view import TableView

_LEVEL_COLORS = {"critical": "#fde2e4", "warning": "#fff4d6"}


class DashboardView(QWidget):
    """
    Home screen: KPI cards, best sellers and low-stock alerts.

    Signals:
        create_sale_requested()
        kpi_clicked(key: str)
    """

    create_sale_requested = Signal()
    kpi_clicked = Signal(str)

    KPIS = [
        ("net_sales", "Ventas de hoy", "sin domicilios"),
        ("units_in_stock", "Productos en stock", "unidades disponibles"),
        ("active_customers", "Clientes activos", "registrados"),
        ("sale_count", "Ventas realizadas", "hoy"),
    ]

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._kpi_cards: Dict[str, KPICard] = {}

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(10)

        top = QHBoxLayout()
        self.lbl_title = QLabel("<h2>Dashboard</h2>")
        self.lbl_title.setTextFormat(Qt.RichText)
        top.addWidget(self.lbl_title)
        top.addStretch(1)
        self.btn_new_sale = QPushButton("Nueva venta")
        self.btn_new_sale.clicked.connect(self.create_sale_requested)
        top.addWidget(self.btn_new_sale)
        root.addLayout(top)

        grid = QGridLayout()
        grid.setHorizontalSpacing(10)
        for i, (key, title, caption) in enumerate(self.KPIS):
            card = KPICard(title, caption)
            card.clicked.connect(lambda k=key: self.kpi_clicked.emit(k))
            self._kpi_cards[key] = card
            grid.addWidget(card, 0, i)
        root.addLayout(grid)

        tables = QHBoxLayout()
        tables.setSpacing(10)

        self.tbl_top_products = TableView()
        self.model_top_products = QStandardItemModel(0, 3)
        self.model_top_products.setHorizontalHeaderLabels(["Producto", "Vendidos", "Stock"])
        self.tbl_top_products.setModel(self.model_top_products)
        self._prep_simple_table(self.tbl_top_products)
        tables.addWidget(Card(self.tbl_top_products, "Productos más vendidos"), 1)

        self.tbl_alerts = TableView()
        self.model_alerts = QStandardItemModel(0, 2)
        self.model_alerts.setHorizontalHeaderLabels(["Producto", "Alerta"])
        self.tbl_alerts.setModel(self.model_alerts)
        self._prep_simple_table(self.tbl_alerts)
        tables.addWidget(Card(self.tbl_alerts, "Alertas de stock"), 1)

        root.addLayout(tables, 1)

    @staticmethod
    def _prep_simple_table(tv: QTableView) -> None:
        tv.setSelectionMode(QAbstractItemView.NoSelection)
        tv.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        tv.horizontalHeader().setStretchLastSection(True)

    # ---------------- Public setters for controller ----------------
    def kpi(self, key: str) -> KPICard:
        return self._kpi_cards[key]

    def set_kpis(self, *, net_sales: float, units_in_stock: int, active_customers: int, sale_count: int) -> None:
        self._kpi_cards["net_sales"].set_value(fmt_cop(net_sales))
        self._kpi_cards["units_in_stock"].set_value(str(units_in_stock))
        self._kpi_cards["active_customers"].set_value(str(active_customers))
        self._kpi_cards["sale_count"].set_value(str(sale_count))

    def set_top_products(self, rows: List[Dict[str, object]]) -> None:
        self.model_top_products.removeRows(0, self.model_top_products.rowCount())
        for r in rows:
            self.model_top_products.appendRow([
                QStandardItem(str(r["product_name"])),
                QStandardItem(str(r["units"])),
                QStandardItem(str(r["stock_quantity"])),
            ])

    def set_alerts(self, rows: List[Dict[str, object]]) -> None:
        self.model_alerts.removeRows(0, self.model_alerts.rowCount())
        if not rows:
            self.model_alerts.appendRow([QStandardItem("Sin alertas"), QStandardItem("")])
            return
        for r in rows:
            name = QStandardItem(f"{r['product_name']} ({r['sku']})")
            msg = QStandardItem(f"Solo {r['stock_quantity']} unidades restantes")
            brush = QBrush(QColor(_LEVEL_COLORS[r["level"]]))
            for it in (name, msg):
                it.setBackground(brush)
            self.model_alerts.appendRow([name, msg])
