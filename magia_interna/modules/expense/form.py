"""
Dialog for creating and editing expenses.

Collects: description, amount, category, payment method, date, notes
and an optional receipt reference.
Validates: non-empty description, amount > 0.
On accept, `payload()` returns a dict with the `Expense` fields.
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLineEdit,
    QDateEdit,
    QComboBox,
    QVBoxLayout,
    QLabel,
    QWidget,
)
from PySide6.QtCore import QDate

from ...constants import EXPENSE_CATEGORIES, EXPENSE_PAYMENT_METHODS
from ...utils.validators import non_empty
from ...widgets.money_edit import MoneyEdit


class ExpenseForm(QDialog):
    """Modal dialog for adding or editing an expense."""

    def __init__(self, parent: QWidget | None = None, *, initial: Optional[dict] = None):
        super().__init__(parent)
        self.setWindowTitle("Editar gasto" if initial else "Nuevo gasto")
        self.setModal(True)
        self.setMinimumWidth(420)

        self._expense_id = (
            int(initial["expense_id"]) if initial and initial.get("expense_id") else None
        )

        # --- Widgets ------------------------------------------------------
        self.edt_description = QLineEdit()
        self.edt_description.setPlaceholderText("p. ej. Arriendo del local, publicidad…")
        self.edt_description.setClearButtonEnabled(True)

        self.edt_amount = MoneyEdit()

        self.cmb_category = QComboBox()
        for name in EXPENSE_CATEGORIES:
            self.cmb_category.addItem(name, userData=name)

        self.cmb_method = QComboBox()
        for key, label in EXPENSE_PAYMENT_METHODS:
            self.cmb_method.addItem(label, userData=key)

        self.date_edit = QDateEdit()
        self.date_edit.setDisplayFormat("dd/MM/yyyy")
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDate(QDate.currentDate())

        self.edt_notes = QLineEdit()
        self.edt_receipt = QLineEdit()
        self.edt_receipt.setPlaceholderText("Número de factura o recibo")

        self.lbl_error = QLabel("")
        self.lbl_error.setObjectName("errorLabel")
        self.lbl_error.setStyleSheet("color:#b00020;")
        self.lbl_error.setVisible(False)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

        # --- Layout -------------------------------------------------------
        layout = QVBoxLayout(self)
        form = QFormLayout()
        form.addRow("Descripción*", self.edt_description)
        form.addRow("Monto*", self.edt_amount)
        form.addRow("Categoría*", self.cmb_category)
        form.addRow("Método de pago*", self.cmb_method)
        form.addRow("Fecha*", self.date_edit)
        form.addRow("Notas", self.edt_notes)
        form.addRow("Comprobante", self.edt_receipt)
        layout.addLayout(form)
        layout.addWidget(self.lbl_error)
        layout.addWidget(self.buttons)

        # --- Prefill ------------------------------------------------------
        if initial:
            self.edt_description.setText(initial.get("description") or "")
            self.edt_amount.setValue(initial.get("amount") or 0.0)
            idx = self.cmb_category.findData(initial.get("category"))
            self.cmb_category.setCurrentIndex(max(idx, 0))
            idx = self.cmb_method.findData(initial.get("payment_method"))
            self.cmb_method.setCurrentIndex(max(idx, 0))
            date_val = initial.get("expense_date")
            if date_val:
                qd = QDate.fromString(str(date_val)[:10], "yyyy-MM-dd")
                if qd.isValid():
                    self.date_edit.setDate(qd)
            self.edt_notes.setText(initial.get("notes") or "")
            self.edt_receipt.setText(initial.get("receipt_ref") or "")

        self.setTabOrder(self.edt_description, self.edt_amount)
        self.setTabOrder(self.edt_amount, self.cmb_category)
        self.setTabOrder(self.cmb_category, self.cmb_method)
        self.setTabOrder(self.cmb_method, self.date_edit)

        self._payload: Optional[dict] = None

    # ----------------------------------------------------------------------
    # Validation & payload
    # ----------------------------------------------------------------------
    def _fail(self, message: str, widget_to_focus: QWidget) -> None:
        self.lbl_error.setText(message)
        self.lbl_error.setVisible(True)
        widget_to_focus.setFocus()

    def get_payload(self) -> dict | None:
        """Validate inputs and return a dict or None on failure."""
        self.lbl_error.setVisible(False)

        if not non_empty(self.edt_description.text()):
            self._fail("La descripción es obligatoria.", self.edt_description)
            return None

        amount = self.edt_amount.value()
        if amount <= 0.0:
            self._fail("El monto debe ser mayor a cero.", self.edt_amount)
            return None

        return {
            "expense_id": self._expense_id,
            "description": self.edt_description.text().strip(),
            "amount": amount,
            "category": self.cmb_category.currentData(),
            "payment_method": self.cmb_method.currentData(),
            "expense_date": self.date_edit.date().toString("yyyy-MM-dd"),
            "notes": self.edt_notes.text().strip() or None,
            "receipt_ref": self.edt_receipt.text().strip() or None,
        }

    def accept(self) -> None:  # type: ignore[override]
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self) -> dict | None:
        """Return the last accepted payload, or None if dialog was canceled."""
        return self._payload
