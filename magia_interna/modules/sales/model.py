from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from PySide6.QtGui import QColor

from ...constants import PAYMENT_METHODS
from ...utils.dates import format_date_display
from ...utils.helpers import fmt_cop

PAYMENT_LABELS = dict(PAYMENT_METHODS)
STATUS_LABELS = {"completed": "Completada", "cancelled": "Anulada"}


class SalesTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Fecha", "Cliente", "Método de pago", "Domicilio", "Total", "Estado"]

    def __init__(self, rows):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        r = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                r["sale_id"],
                format_date_display(r["sale_date"]),
                r["customer_name"],
                PAYMENT_LABELS.get(r["payment_method"], r["payment_method"]),
                fmt_cop(r["delivery_fee"]),
                fmt_cop(r["total_amount"]),
                STATUS_LABELS.get(r["status"], r["status"]),
            ][c]
        if role == Qt.UserRole:
            return r["sale_id"]
        if role == Qt.TextAlignmentRole and c in (4, 5):
            return int(Qt.AlignRight | Qt.AlignVCenter)
        if role == Qt.ForegroundRole and r["status"] == "cancelled":
            return QColor("#888888")
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int):
        return self._rows[row]

    def replace(self, rows):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()


class SaleItemsTableModel(QAbstractTableModel):
    HEADERS = ["Producto", "SKU", "Cant.", "Precio", "Total"]

    def __init__(self, rows=None):
        super().__init__()
        self._rows = rows or []

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        r = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                r["product_name"],
                r["sku"],
                r["quantity"],
                fmt_cop(r["unit_price"]),
                fmt_cop(r["total_price"]),
            ][c]
        if role == Qt.TextAlignmentRole and c >= 2:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def replace(self, rows):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
