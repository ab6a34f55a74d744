from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...constants import CUSTOMER_TYPES
from ...database.repositories.customers_repo import Customer
from ...utils.dates import format_date_display
from ...utils.helpers import fmt_cop

_TYPE_LABELS = dict(CUSTOMER_TYPES)


class CustomersTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Nombre", "Teléfono", "E-mail", "Ciudad", "Tipo", "Total compras", "Última compra", "Estado"]

    def __init__(self, rows: list[Customer]):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        c = self._rows[index.row()]
        col = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                c.customer_id,
                c.name,
                c.phone or "",
                c.email or "",
                c.city or "",
                _TYPE_LABELS.get(c.customer_type, c.customer_type),
                fmt_cop(c.total_purchases),
                format_date_display(c.last_purchase_date),
                "Activo" if c.is_active else "Inactivo",
            ][col]
        if role == Qt.UserRole:
            return c.customer_id
        if role == Qt.TextAlignmentRole and col == 6:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Customer:
        return self._rows[row]

    def replace(self, rows: list[Customer]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
