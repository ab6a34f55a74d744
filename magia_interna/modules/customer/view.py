from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QLineEdit,
    QLabel,
    QSplitter,
    QCheckBox,
)
from PySide6.QtCore import Qt

from ...widgets.table_view import TableView
from .details import CustomerDetails


class CustomerView(QWidget):
    """
    Customers view:
      - Toolbar: Nuevo, Editar, Eliminar
      - Search box + 'Mostrar inactivos' toggle
      - Split: table (left) + details (right)
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        bar = QHBoxLayout()
        self.btn_add = QPushButton("Nuevo")
        self.btn_edit = QPushButton("Editar")
        self.btn_del = QPushButton("Eliminar")
        bar.addWidget(self.btn_add)
        bar.addWidget(self.btn_edit)
        bar.addWidget(self.btn_del)
        bar.addStretch(1)

        bar.addWidget(QLabel("Buscar:"))
        self.search = QLineEdit()
        self.search.setPlaceholderText("Nombre o e-mail…")
        self.search.setClearButtonEnabled(True)
        bar.addWidget(self.search, 2)

        self.chk_show_inactive = QCheckBox("Mostrar inactivos")
        bar.addWidget(self.chk_show_inactive)
        root.addLayout(bar)

        split = QSplitter(Qt.Horizontal)
        self.table = TableView()
        split.addWidget(self.table)
        self.details = CustomerDetails()
        split.addWidget(self.details)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split, 1)

    @property
    def search_text(self) -> str:
        return self.search.text().strip()
