"""
View for the expense module.

- Search box and an optional date range (blank == no bound)
- Buttons: Nuevo / Editar / Eliminar
- Expenses table, totals-by-category table and this month's total

Exposes convenience properties:
- search_text: str
- date_from_str: str | None          (format: yyyy-MM-dd)
- date_to_str: str | None            (format: yyyy-MM-dd)
"""

from __future__ import annotations

from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QDateEdit,
    QPushButton,
    QSplitter,
    QTableView,
)
from PySide6.QtCore import Qt, QDate

from ...widgets.table_view import TableView

_NO_DATE = QDate(1900, 1, 1)


class ExpenseView(QWidget):
    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(8)

        top_row = QHBoxLayout()
        self.btn_add = QPushButton("Nuevo")
        self.btn_edit = QPushButton("Editar")
        self.btn_delete = QPushButton("Eliminar")
        top_row.addWidget(self.btn_add)
        top_row.addWidget(self.btn_edit)
        top_row.addWidget(self.btn_delete)
        top_row.addStretch(1)

        top_row.addWidget(QLabel("Buscar:"))
        self.txt_search = QLineEdit()
        self.txt_search.setPlaceholderText("Descripción o categoría…")
        self.txt_search.setClearButtonEnabled(True)
        self.txt_search.setMinimumWidth(180)
        top_row.addWidget(self.txt_search, 1)

        self.date_from = self._date_edit()
        self.date_to = self._date_edit()
        top_row.addWidget(QLabel("Desde:"))
        top_row.addWidget(self.date_from)
        top_row.addWidget(QLabel("Hasta:"))
        top_row.addWidget(self.date_to)
        self.btn_clear_dates = QPushButton("×")
        self.btn_clear_dates.setToolTip("Quitar filtro de fechas")
        self.btn_clear_dates.setFixedWidth(24)
        self.btn_clear_dates.clicked.connect(self.clear_dates)
        top_row.addWidget(self.btn_clear_dates)
        root.addLayout(top_row)

        split = QSplitter(Qt.Horizontal)
        self.tbl_expenses = TableView()
        split.addWidget(self.tbl_expenses)
        self.tbl_totals = QTableView()
        self.tbl_totals.verticalHeader().setVisible(False)
        self.tbl_totals.horizontalHeader().setStretchLastSection(True)
        self.tbl_totals.setEditTriggers(QTableView.NoEditTriggers)
        split.addWidget(self.tbl_totals)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 1)
        root.addWidget(split, 1)

        self.lbl_month_total = QLabel("")
        self.lbl_month_total.setStyleSheet("font-weight:bold;")
        root.addWidget(self.lbl_month_total)

    @staticmethod
    def _date_edit() -> QDateEdit:
        d = QDateEdit()
        d.setCalendarPopup(True)
        d.setDisplayFormat("dd/MM/yyyy")
        d.setMinimumDate(_NO_DATE)
        d.setSpecialValueText(" ")
        d.setDate(_NO_DATE)
        return d

    def clear_dates(self) -> None:
        self.date_from.setDate(_NO_DATE)
        self.date_to.setDate(_NO_DATE)

    @property
    def search_text(self) -> str:
        return self.txt_search.text().strip()

    @staticmethod
    def _date_str(d: QDateEdit) -> str | None:
        if d.date() == _NO_DATE:
            return None
        return d.date().toString("yyyy-MM-dd")

    @property
    def date_from_str(self) -> str | None:
        return self._date_str(self.date_from)

    @property
    def date_to_str(self) -> str | None:
        return self._date_str(self.date_to)
