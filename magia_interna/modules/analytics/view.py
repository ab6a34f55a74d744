from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from PySide6.QtCore import Qt
from PySide6.QtGui import QStandardItem, QStandardItemModel
from PySide6.QtWidgets import (
    QComboBox,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from ...constants import MONTH_ABBR_ES, MONTH_NAMES_ES
from ...widgets.kpi_card import KPICard
from ...widgets.table_view import TableView


class AnalyticsView(QWidget):
    KPIS = [
        ("net_sales", "Ventas netas", "sin domicilios"),
        ("delivery_fees", "Domicilios", "cobrados aparte"),
        ("profit", "Ganancia", "ventas − costo − desc. − imp."),
        ("expenses", "Gastos", "del periodo"),
        ("profit_after_expenses", "Ganancia neta", "después de gastos"),
        ("margin_pct", "Margen", "ganancia / ventas"),
        ("product_count", "Productos", "en catálogo"),
        ("customer_count", "Clientes", "registrados"),
        ("low_stock_count", "Stock bajo", "5 unidades o menos"),
    ]

    MODES = [("month", "Mensual"), ("week", "Semanal"), ("day", "Diario")]

    def __init__(self, parent=None):
        super().__init__(parent)
        self._cards: Dict[str, KPICard] = {}

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        top = QHBoxLayout()
        top.addWidget(QLabel("<h2>Analytics</h2>"))
        top.addStretch(1)
        self.cmb_year = QComboBox()
        self.cmb_month = QComboBox()
        self.cmb_month.addItem("Todo el año", None)
        for i, name in enumerate(MONTH_NAMES_ES, start=1):
            self.cmb_month.addItem(name, i)
        self.cmb_mode = QComboBox()
        for key, label in self.MODES:
            self.cmb_mode.addItem(label, key)
        top.addWidget(QLabel("Año:"))
        top.addWidget(self.cmb_year)
        top.addWidget(QLabel("Mes:"))
        top.addWidget(self.cmb_month)
        top.addWidget(QLabel("Agrupar:"))
        top.addWidget(self.cmb_mode)
        root.addLayout(top)

        grid = QGridLayout()
        for i, (key, title, caption) in enumerate(self.KPIS):
            card = KPICard(title, caption)
            self._cards[key] = card
            grid.addWidget(card, i // 5, i % 5)
        root.addLayout(grid)

        self.tabs = QTabWidget()
        self.tbl_buckets = self._add_tab("Ganancias")
        self.tbl_units = self._add_tab("Unidades por categoría")
        self.tbl_payments = self._add_tab("Métodos de pago")
        self.tbl_expenses = self._add_tab("Gastos por categoría")
        self.tbl_customers = self._add_tab("Tipos de cliente")
        self.tbl_products = self._add_tab("Productos por categoría")
        root.addWidget(self.tabs, 1)

    def _add_tab(self, title: str) -> TableView:
        tv = TableView()
        self.tabs.addTab(tv, title)
        return tv

    # ---------------- selectors ----------------
    def set_years(self, years: Iterable[int], current: int) -> None:
        self.cmb_year.blockSignals(True)
        self.cmb_year.clear()
        for y in years:
            self.cmb_year.addItem(str(y), y)
        self.cmb_year.setCurrentIndex(max(self.cmb_year.findData(current), 0))
        self.cmb_year.blockSignals(False)

    @property
    def year(self) -> int | None:
        return self.cmb_year.currentData()

    @property
    def month(self) -> int | None:
        return self.cmb_month.currentData()

    @property
    def mode(self) -> str:
        return self.cmb_mode.currentData()

    # ---------------- setters ----------------
    def card(self, key: str) -> KPICard:
        return self._cards[key]

    def set_kpi(self, key: str, text: str) -> None:
        self._cards[key].set_value(text)

    @staticmethod
    def fill(tv: TableView, headers: Sequence[str], rows: List[Sequence[object]], numeric_from: int = 1) -> None:
        m = QStandardItemModel(0, len(headers))
        m.setHorizontalHeaderLabels(list(headers))
        for r in rows:
            items = []
            for c, v in enumerate(r):
                it = QStandardItem(str(v))
                it.setEditable(False)
                if c >= numeric_from:
                    it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                items.append(it)
            m.appendRow(items)
        tv.setModel(m)
        tv.resizeColumnsToContents()

    @staticmethod
    def month_headers() -> List[str]:
        return ["Categoría"] + list(MONTH_ABBR_ES) + ["Total"]
