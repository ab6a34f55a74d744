from PySide6.QtWidgets import QWidget, QVBoxLayout, QGroupBox, QFormLayout, QLabel

from ...constants import CUSTOMER_TYPES, DOCUMENT_TYPES
from ...database.repositories.customers_repo import Customer
from ...utils.dates import (
    birthday_label,
    calculate_age,
    days_until_birthday,
    format_birth_date,
    format_date_display,
    parse_birth_date,
)
from ...utils.helpers import fmt_cop


class CustomerDetails(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)

        # --- Basic info ---
        box_basic = QGroupBox("Datos del cliente")
        f_basic = QFormLayout(box_basic)

        self.lab_id = QLabel("-")
        self.lab_name = QLabel("-")
        self.lab_contact = QLabel("-")
        self.lab_document = QLabel("-")
        self.lab_address = QLabel("-")
        self.lab_address.setWordWrap(True)
        self.lab_birth = QLabel("-")

        f_basic.addRow("ID:", self.lab_id)
        f_basic.addRow("Nombre:", self.lab_name)
        f_basic.addRow("Contacto:", self.lab_contact)
        f_basic.addRow("Documento:", self.lab_document)
        f_basic.addRow("Dirección:", self.lab_address)
        f_basic.addRow("Cumpleaños:", self.lab_birth)

        # --- Purchases snapshot ---
        box_fin = QGroupBox("Compras")
        f_fin = QFormLayout(box_fin)

        self.lab_type = QLabel("-")
        self.lab_status = QLabel("-")
        self.lab_total = QLabel("-")
        self.lab_last_sale = QLabel("-")

        f_fin.addRow("Tipo:", self.lab_type)
        f_fin.addRow("Estado:", self.lab_status)
        f_fin.addRow("Total compras:", self.lab_total)
        f_fin.addRow("Última compra:", self.lab_last_sale)

        root = QVBoxLayout(self)
        root.addWidget(box_basic)
        root.addWidget(box_fin)
        root.addStretch(1)

    @staticmethod
    def _fmt_text(val) -> str:
        return "-" if val is None or val == "" else str(val)

    @staticmethod
    def _birth_text(birth_date) -> str:
        shown = format_birth_date(birth_date)
        if parse_birth_date(birth_date) is None:
            return shown
        age = calculate_age(birth_date)
        days = days_until_birthday(birth_date)
        return f"{shown} ({age} años, {birthday_label(days)})"

    def clear(self) -> None:
        for lab in (
            self.lab_id, self.lab_name, self.lab_contact, self.lab_document,
            self.lab_address, self.lab_birth, self.lab_type, self.lab_status,
            self.lab_total, self.lab_last_sale,
        ):
            lab.setText("-")

    def set_data(self, c: Customer | None) -> None:
        if c is None:
            self.clear()
            return
        contact = " · ".join(x for x in (c.phone, c.email) if x)
        address = ", ".join(x for x in (c.address, c.city, c.postal_code) if x)
        doc_label = dict(DOCUMENT_TYPES).get(c.document_type or "", c.document_type)
        document = f"{doc_label} {c.document_number}" if c.document_number else ""

        self.lab_id.setText(str(c.customer_id))
        self.lab_name.setText(c.name)
        self.lab_contact.setText(self._fmt_text(contact))
        self.lab_document.setText(self._fmt_text(document))
        self.lab_address.setText(self._fmt_text(address))
        self.lab_birth.setText(self._birth_text(c.birth_date))
        self.lab_type.setText(dict(CUSTOMER_TYPES).get(c.customer_type, c.customer_type))
        self.lab_status.setText("Activo" if c.is_active else "Inactivo")
        self.lab_total.setText(fmt_cop(c.total_purchases))
        self.lab_last_sale.setText(format_date_display(c.last_purchase_date) or "-")
