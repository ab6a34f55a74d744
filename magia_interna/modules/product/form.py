"""
Dialog for creating and editing products.

Validates: name (required, at most 60 characters), SKU, category,
non-negative price/cost/stock. On accept, `payload()` returns a dict
compatible with ProductsRepo.create/update.
"""

from __future__ import annotations

from typing import Iterable, Optional

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLineEdit,
    QComboBox,
    QSpinBox,
    QCheckBox,
    QPlainTextEdit,
    QVBoxLayout,
    QLabel,
    QWidget,
)

from ...constants import DEFAULT_MIN_STOCK, NAME_MAX_LENGTH
from ...utils.validators import non_empty, name_too_long
from ...widgets.money_edit import MoneyEdit


class ProductForm(QDialog):
    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        categories: Iterable[str] = (),
        initial: Optional[dict] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Editar producto" if initial else "Nuevo producto")
        self.setModal(True)
        self.setMinimumWidth(460)
        self._product_id = initial.get("product_id") if initial else None

        self.name = QLineEdit()
        self.name.setMaxLength(NAME_MAX_LENGTH + 20)
        self.lbl_name_count = QLabel(f"0/{NAME_MAX_LENGTH}")
        self.name.textChanged.connect(self._update_name_count)

        self.sku = QLineEdit()
        self.category = QComboBox()
        self.category.setEditable(True)
        for c in categories:
            self.category.addItem(c)
        self.category.setCurrentText("")

        self.price = MoneyEdit()
        self.cost = MoneyEdit()
        self.stock = QSpinBox()
        self.stock.setRange(0, 1_000_000)
        self.min_stock = QSpinBox()
        self.min_stock.setRange(0, 1_000_000)
        self.min_stock.setValue(DEFAULT_MIN_STOCK)
        self.size = QLineEdit()
        self.color = QLineEdit()
        self.image_url = QLineEdit()
        self.description = QPlainTextEdit()
        self.description.setFixedHeight(70)
        self.is_active = QCheckBox("Activo")
        self.is_active.setChecked(True)

        self.lbl_error = QLabel("")
        self.lbl_error.setStyleSheet("color:#b00020;")
        self.lbl_error.setVisible(False)

        form = QFormLayout()
        form.addRow("Nombre*", self.name)
        form.addRow("", self.lbl_name_count)
        form.addRow("SKU*", self.sku)
        form.addRow("Categoría*", self.category)
        form.addRow("Precio de venta", self.price)
        form.addRow("Costo", self.cost)
        form.addRow("Stock", self.stock)
        form.addRow("Stock mínimo", self.min_stock)
        form.addRow("Talla", self.size)
        form.addRow("Color", self.color)
        form.addRow("URL de imagen", self.image_url)
        form.addRow("Descripción", self.description)
        form.addRow("", self.is_active)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addLayout(form)
        lay.addWidget(self.lbl_error)
        lay.addWidget(self.buttons)

        if initial:
            self.name.setText(initial.get("name") or "")
            self.sku.setText(initial.get("sku") or "")
            self.category.setCurrentText(initial.get("category") or "")
            self.price.setValue(initial.get("price") or 0)
            self.cost.setValue(initial.get("cost") or 0)
            self.stock.setValue(int(initial.get("stock_quantity") or 0))
            self.min_stock.setValue(int(initial.get("min_stock") or 0))
            self.size.setText(initial.get("size") or "")
            self.color.setText(initial.get("color") or "")
            self.image_url.setText(initial.get("image_url") or "")
            self.description.setPlainText(initial.get("description") or "")
            self.is_active.setChecked(bool(initial.get("is_active", 1)))

        self._payload: Optional[dict] = None

    def _update_name_count(self, text: str) -> None:
        n = len(text.strip())
        self.lbl_name_count.setText(f"{n}/{NAME_MAX_LENGTH}")
        self.lbl_name_count.setStyleSheet("color:#b00020;" if n > NAME_MAX_LENGTH else "")

    def _fail(self, message: str, widget_to_focus: QWidget) -> None:
        self.lbl_error.setText(message)
        self.lbl_error.setVisible(True)
        widget_to_focus.setFocus()

    def get_payload(self) -> dict | None:
        self.lbl_error.setVisible(False)

        if not non_empty(self.name.text()):
            self._fail("El nombre es obligatorio.", self.name)
            return None
        if name_too_long(self.name.text()):
            self._fail(f"El nombre no puede exceder los {NAME_MAX_LENGTH} caracteres.", self.name)
            return None
        if not non_empty(self.sku.text()):
            self._fail("El SKU es obligatorio.", self.sku)
            return None
        if not non_empty(self.category.currentText()):
            self._fail("La categoría es obligatoria.", self.category)
            return None

        return {
            "product_id": self._product_id,
            "name": self.name.text().strip(),
            "sku": self.sku.text().strip(),
            "category": self.category.currentText().strip(),
            "price": self.price.value(),
            "cost": self.cost.value(),
            "stock_quantity": self.stock.value(),
            "min_stock": self.min_stock.value(),
            "size": self.size.text().strip() or None,
            "color": self.color.text().strip() or None,
            "image_url": self.image_url.text().strip() or None,
            "description": self.description.toPlainText().strip() or None,
            "is_active": 1 if self.is_active.isChecked() else 0,
        }

    def accept(self) -> None:  # type: ignore[override]
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self) -> dict | None:
        return self._payload
