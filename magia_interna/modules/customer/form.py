from __future__ import annotations

import re
from typing import Optional

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QDialog,
    QFormLayout,
    QDialogButtonBox,
    QVBoxLayout,
    QHBoxLayout,
    QLineEdit,
    QComboBox,
    QCheckBox,
    QDateEdit,
    QLabel,
    QWidget,
)

from ...constants import CUSTOMER_TYPES, DOCUMENT_TYPES, NAME_MAX_LENGTH
from ...utils.dates import parse_birth_date
from ...utils.validators import looks_like_email, name_too_long, non_empty


class CustomerForm(QDialog):
    """
    Customer create/edit form.

    - Required: name (at most 60 characters).
    - Optional birth date behind a checkbox so it can stay empty.
    - E-mail is checked for a plausible shape when given.

    Args:
        parent: Qt parent
        initial: optional dict with Customer fields (customer_id, name, email, ...)
    """

    def __init__(self, parent=None, initial: dict | None = None):
        super().__init__(parent)
        self.setWindowTitle("Editar cliente" if initial else "Nuevo cliente")
        self.setModal(True)
        self.setMinimumWidth(440)
        self._initial = initial or {}

        # --- Fields ---
        self.name = QLineEdit()
        self.email = QLineEdit()
        self.phone = QLineEdit()
        self.address = QLineEdit()
        self.city = QLineEdit()
        self.postal_code = QLineEdit()

        self.document_type = QComboBox()
        self.document_type.addItem("(Sin documento)", None)
        for key, label in DOCUMENT_TYPES:
            self.document_type.addItem(label, key)
        self.document_number = QLineEdit()

        self.chk_birth = QCheckBox("Registrar")
        self.birth_date = QDateEdit()
        self.birth_date.setDisplayFormat("dd/MM/yyyy")
        self.birth_date.setCalendarPopup(True)
        self.birth_date.setDate(QDate(1990, 1, 1))
        self.birth_date.setEnabled(False)
        self.chk_birth.toggled.connect(self.birth_date.setEnabled)
        birth_row = QWidget()
        birth_lay = QHBoxLayout(birth_row)
        birth_lay.setContentsMargins(0, 0, 0, 0)
        birth_lay.addWidget(self.chk_birth)
        birth_lay.addWidget(self.birth_date, 1)

        self.customer_type = QComboBox()
        for key, label in CUSTOMER_TYPES:
            self.customer_type.addItem(label, key)

        self.is_active = QCheckBox("Activo")
        self.is_active.setChecked(True)

        self.lbl_error = QLabel("")
        self.lbl_error.setStyleSheet("color:#b00020;")
        self.lbl_error.setVisible(False)

        # --- Layout ---
        form = QFormLayout()
        form.addRow("Nombre*", self.name)
        form.addRow("E-mail", self.email)
        form.addRow("Teléfono", self.phone)
        form.addRow("Dirección", self.address)
        form.addRow("Ciudad", self.city)
        form.addRow("Código postal", self.postal_code)
        form.addRow("Tipo de documento", self.document_type)
        form.addRow("Número de documento", self.document_number)
        form.addRow("Fecha de nacimiento", birth_row)
        form.addRow("Tipo de cliente", self.customer_type)
        form.addRow("", self.is_active)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self.lbl_error)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

        # --- Initial values ---
        if initial:
            self.name.setText(initial.get("name") or "")
            self.email.setText(initial.get("email") or "")
            self.phone.setText(initial.get("phone") or "")
            self.address.setText(initial.get("address") or "")
            self.city.setText(initial.get("city") or "")
            self.postal_code.setText(initial.get("postal_code") or "")
            idx = self.document_type.findData(initial.get("document_type"))
            self.document_type.setCurrentIndex(max(idx, 0))
            self.document_number.setText(initial.get("document_number") or "")
            born = parse_birth_date(initial.get("birth_date"))
            if born is not None:
                self.chk_birth.setChecked(True)
                self.birth_date.setDate(QDate(born.year, born.month, born.day))
            idx = self.customer_type.findData(initial.get("customer_type"))
            self.customer_type.setCurrentIndex(max(idx, 0))
            ia = initial.get("is_active")
            if ia is not None:
                self.is_active.setChecked(bool(ia))

        self._payload = None

    # ---------------- helpers ----------------

    @staticmethod
    def _collapse_spaces(line: str) -> str:
        return re.sub(r"\s+", " ", line or "").strip()

    def _fail(self, message: str, widget: QWidget) -> None:
        self.lbl_error.setText(message)
        self.lbl_error.setVisible(True)
        widget.setFocus()

    # ---------------- API ----------------

    def get_payload(self) -> dict | None:
        self.lbl_error.setVisible(False)
        name = self._collapse_spaces(self.name.text())
        if not non_empty(name):
            self._fail("El nombre es obligatorio.", self.name)
            return None
        if name_too_long(name):
            self._fail(f"El nombre no puede exceder los {NAME_MAX_LENGTH} caracteres.", self.name)
            return None
        email = self.email.text().strip()
        if email and not looks_like_email(email):
            self._fail("El e-mail no parece válido.", self.email)
            return None

        birth = None
        if self.chk_birth.isChecked():
            birth = self.birth_date.date().toString("yyyy-MM-dd")

        return {
            "customer_id": self._initial.get("customer_id"),
            "name": name,
            "email": email or None,
            "phone": self.phone.text().strip() or None,
            "address": self._collapse_spaces(self.address.text()) or None,
            "city": self.city.text().strip() or None,
            "postal_code": self.postal_code.text().strip() or None,
            "document_type": self.document_type.currentData(),
            "document_number": self.document_number.text().strip() or None,
            "birth_date": birth,
            "customer_type": self.customer_type.currentData(),
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
