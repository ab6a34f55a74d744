from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QLineEdit,
    QLabel,
    QComboBox,
    QCheckBox,
    QGroupBox,
    QListWidget,
    QSplitter,
)
from PySide6.QtCore import Qt

from ...widgets.table_view import TableView


class ProductView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        # Top row: actions + filters
        row = QHBoxLayout()
        self.btn_add = QPushButton("Nuevo")
        self.btn_edit = QPushButton("Editar")
        self.btn_del = QPushButton("Eliminar")
        row.addWidget(self.btn_add)
        row.addWidget(self.btn_edit)
        row.addWidget(self.btn_del)
        row.addStretch(1)

        self.cmb_category = QComboBox()
        self.chk_active_only = QCheckBox("Solo activos")
        self.search = QLineEdit()
        self.search.setPlaceholderText("Buscar por nombre o SKU…")
        self.search.setClearButtonEnabled(True)
        row.addWidget(QLabel("Categoría:"))
        row.addWidget(self.cmb_category)
        row.addWidget(self.chk_active_only)
        row.addWidget(QLabel("Buscar:"))
        row.addWidget(self.search, 2)
        layout.addLayout(row)

        split = QSplitter(Qt.Horizontal)
        self.table = TableView()
        split.addWidget(self.table)

        box = QGroupBox("Stock bajo")
        box_lay = QVBoxLayout(box)
        self.lst_low_stock = QListWidget()
        box_lay.addWidget(self.lst_low_stock)
        split.addWidget(box)
        split.setStretchFactor(0, 4)
        split.setStretchFactor(1, 1)
        layout.addWidget(split, 1)

        self.lbl_summary = QLabel("")
        layout.addWidget(self.lbl_summary)

    @property
    def search_text(self) -> str:
        return self.search.text().strip()

    @property
    def selected_category(self) -> str | None:
        return self.cmb_category.currentData()
