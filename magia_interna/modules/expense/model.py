"""
Table model for the expense list.

Fed with `Expense` rows from ``ExpensesRepo.search_expenses``; amounts
are shown in pesos with `fmt_cop`.
"""

from __future__ import annotations

from typing import Any, List

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ...constants import EXPENSE_PAYMENT_METHODS
from ...database.repositories.expenses_repo import Expense
from ...utils.dates import format_date_display
from ...utils.helpers import fmt_cop

_METHOD_LABELS = dict(EXPENSE_PAYMENT_METHODS)


class ExpensesTableModel(QAbstractTableModel):
    HEADERS: List[str] = ["ID", "Fecha", "Categoría", "Descripción", "Método", "Monto"]

    def __init__(self, rows: List[Expense]):
        super().__init__()
        self._rows = rows or []

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        return len(self.HEADERS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:  # type: ignore[override]
        if not index.isValid():
            return None
        e = self._rows[index.row()]
        col = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                e.expense_id,
                format_date_display(e.expense_date),
                e.category,
                e.description,
                _METHOD_LABELS.get(e.payment_method, e.payment_method),
                fmt_cop(e.amount),
            ][col]
        if role == Qt.UserRole:
            return e.expense_id
        if role == Qt.TextAlignmentRole and col == 5:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole) -> Any:  # type: ignore[override]
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Expense:
        return self._rows[row]
