from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from PySide6.QtGui import QColor

from ...database.repositories.products_repo import Product
from ...utils.helpers import fmt_cop


class ProductsTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Nombre", "SKU", "Categoría", "Precio", "Costo", "Stock", "Mín.", "Talla", "Color", "Estado"]

    def __init__(self, rows: list[Product]):
        super().__init__()
        self._rows = rows

    # Qt model basics
    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        p = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                p.product_id,
                p.name,
                p.sku,
                p.category,
                fmt_cop(p.price),
                fmt_cop(p.cost),
                p.stock_quantity,
                p.min_stock,
                p.size or "",
                p.color or "",
                "Activo" if p.is_active else "Inactivo",
            ][c]
        if role == Qt.UserRole:
            return p.product_id
        if role == Qt.TextAlignmentRole and c in (4, 5, 6, 7):
            return int(Qt.AlignRight | Qt.AlignVCenter)
        if role == Qt.ForegroundRole and c == 6 and p.is_active and p.is_low_stock:
            return QColor("#b00020")
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Product:
        return self._rows[row]

    def replace(self, rows: list[Product]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
