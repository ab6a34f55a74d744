"""
Controller for the expense module.

Wires ExpensesRepo <-> ExpensesTableModel <-> ExpenseView and connects
Nuevo/Editar/Eliminar to ExpenseForm. Also keeps the totals-by-category
table and this month's total up to date.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional
import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QMessageBox, QDialog
from PySide6.QtGui import QKeySequence, QShortcut, QStandardItemModel, QStandardItem

from ..base_module import BaseModule
from .view import ExpenseView
from .form import ExpenseForm
from .model import ExpensesTableModel
from ...utils import ui_helpers as ui
from ...utils.helpers import fmt_cop, month_bounds
from ...database.repositories.expenses_repo import Expense, ExpensesRepo

_log = logging.getLogger(__name__)


class ExpenseController(BaseModule):
    """UI controller for viewing and managing expenses."""

    def __init__(self, conn):
        super().__init__()
        self.conn = conn
        self.repo = ExpensesRepo(conn)

        self.view = ExpenseView()

        self.view.txt_search.textChanged.connect(lambda _=None: self._reload())
        self.view.date_from.dateChanged.connect(lambda _=None: self._reload())
        self.view.date_to.dateChanged.connect(lambda _=None: self._reload())

        self.view.btn_add.clicked.connect(self._on_add)
        self.view.btn_edit.clicked.connect(self._on_edit)
        self.view.btn_delete.clicked.connect(self._on_delete)

        self._wire_table_shortcuts()
        self._reload()

    # ------------------------------------------------------------------
    # BaseModule
    # ------------------------------------------------------------------
    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload()

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------
    def _reload(self) -> None:
        """Reload the expenses table based on current filters and refresh totals."""
        rows = self.repo.search_expenses(
            query=self.view.search_text,
            date_from=self.view.date_from_str,
            date_to=self.view.date_to_str,
        )
        self.view.tbl_expenses.setModel(ExpensesTableModel(rows))
        self.view.tbl_expenses.resizeColumnsToContents()
        self._refresh_totals()

    def _refresh_totals(self) -> None:
        """Totals by category for the current range, plus this month's total."""
        totals = self.repo.total_by_category(self.view.date_from_str, self.view.date_to_str)

        m = QStandardItemModel()
        m.setHorizontalHeaderLabels(["Categoría", "Total"])
        for r in totals:
            row_items = [
                QStandardItem(str(r["category"])),
                QStandardItem(fmt_cop(r["total_amount"])),
            ]
            row_items[1].setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            for it in row_items:
                it.setEditable(False)
            m.appendRow(row_items)
        self.view.tbl_totals.setModel(m)
        self.view.tbl_totals.resizeColumnsToContents()

        first, last = month_bounds()
        self.view.lbl_month_total.setText(
            f"Gastos de este mes: {fmt_cop(self.repo.total_between(first, last))}"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _selected_expense_id(self) -> Optional[int]:
        return self.view.tbl_expenses.selected_id()

    def _open_form(self, initial: Optional[dict] = None) -> Optional[dict]:
        dlg = ExpenseForm(self.view, initial=initial)
        if dlg.exec() != QDialog.Accepted:
            return None
        return dlg.payload()

    def _wire_table_shortcuts(self) -> None:
        """Double-click and keyboard shortcuts on the table."""
        tv = self.view.tbl_expenses
        tv.doubleClicked.connect(lambda _=None: self._on_edit())

        self._sc_add = QShortcut(QKeySequence("Ctrl+N"), self.view)
        self._sc_edit_r = QShortcut(QKeySequence("Return"), self.view)
        self._sc_del = QShortcut(QKeySequence("Delete"), self.view)
        self._sc_edit_c = QShortcut(QKeySequence("Ctrl+E"), self.view)

        for sc in (self._sc_add, self._sc_edit_r, self._sc_del, self._sc_edit_c):
            sc.setContext(Qt.WidgetWithChildrenShortcut)

        self._sc_add.activated.connect(self._on_add)
        self._sc_edit_r.activated.connect(self._on_edit)
        self._sc_del.activated.connect(self._on_delete)
        self._sc_edit_c.activated.connect(self._on_edit)

    # ------------------------------------------------------------------
    # Button handlers
    # ------------------------------------------------------------------
    def _on_add(self) -> None:
        payload = self._open_form(initial=None)
        if not payload:
            return
        try:
            eid = self.repo.create_expense(Expense(**payload))
            _log.info("Expense %s created (%s)", eid, payload["category"])
            self._reload()
            ui.info(self.view, "Guardado", "Gasto registrado.")
        except Exception as e:
            self._handle_error("No se pudo registrar el gasto", e)

    def _on_edit(self) -> None:
        exp_id = self._selected_expense_id()
        if exp_id is None:
            ui.info(self.view, "Seleccionar", "Seleccione un gasto para editar.")
            return

        current = self.repo.get_expense(exp_id)
        if not current:
            ui.info(self.view, "No encontrado", "El gasto seleccionado ya no existe.")
            self._reload()
            return

        payload = self._open_form(initial=asdict(current))
        if not payload:
            return
        try:
            self.repo.update_expense(Expense(**payload))
            self._reload()
            ui.info(self.view, "Guardado", "Gasto actualizado.")
        except Exception as e:
            self._handle_error("No se pudo actualizar el gasto", e)

    def _on_delete(self) -> None:
        exp_id = self._selected_expense_id()
        if exp_id is None:
            ui.info(self.view, "Seleccionar", "Seleccione un gasto para eliminar.")
            return

        resp = QMessageBox.question(
            self.view,
            "Eliminar",
            f"¿Eliminar el gasto #{exp_id}?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if resp != QMessageBox.StandardButton.Yes:
            return

        try:
            self.repo.delete_expense(exp_id)
            self._reload()
            ui.info(self.view, "Eliminado", "Gasto eliminado.")
        except Exception as e:
            self._handle_error("No se pudo eliminar el gasto", e)
