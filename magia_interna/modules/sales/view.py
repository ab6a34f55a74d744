from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QLineEdit,
    QLabel,
    QSplitter,
)
from PySide6.QtCore import Qt

from ...widgets.table_view import TableView
from .details import SaleDetails


class SalesView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        bar = QHBoxLayout()
        self.btn_add = QPushButton("Nueva venta")
        self.btn_edit = QPushButton("Editar")
        self.btn_cancel = QPushButton("Anular")
        self.btn_del = QPushButton("Eliminar")
        self.btn_receipt = QPushButton("Recibo")
        for b in (self.btn_add, self.btn_edit, self.btn_cancel, self.btn_del, self.btn_receipt):
            bar.addWidget(b)
        bar.addStretch(1)
        bar.addWidget(QLabel("Buscar:"))
        self.search = QLineEdit()
        self.search.setPlaceholderText("Cliente o método de pago…")
        self.search.setClearButtonEnabled(True)
        bar.addWidget(self.search, 2)
        root.addLayout(bar)

        split = QSplitter(Qt.Horizontal)
        self.tbl = TableView()
        split.addWidget(self.tbl)
        self.details = SaleDetails()
        split.addWidget(self.details)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split, 1)

        self.lbl_status = QLabel("")
        root.addWidget(self.lbl_status)

    @property
    def search_text(self) -> str:
        return self.search.text().strip()
