from PySide6.QtWidgets import QWidget, QVBoxLayout, QGroupBox, QFormLayout, QLabel

from ...utils.dates import format_date_display
from ...utils.helpers import fmt_cop
from ...widgets.table_view import TableView
from .model import PAYMENT_LABELS, STATUS_LABELS, SaleItemsTableModel


class SaleDetails(QWidget):
    """
    Read-only panel for the selected sale: header facts and its lines.

    Expected keys in set_data(row): sale_id, sale_date, customer_name,
    payment_method, status, discount_amount, tax_amount, delivery_fee,
    total_amount, notes.
    """

    def __init__(self, parent=None):
        super().__init__(parent)

        self.box = QGroupBox("Detalle de la venta")
        f = QFormLayout(self.box)
        self.lab_id = QLabel("-")
        self.lab_date = QLabel("-")
        self.lab_customer = QLabel("-")
        self.lab_method = QLabel("-")
        self.lab_status = QLabel("-")
        self.lab_discount = QLabel("-")
        self.lab_tax = QLabel("-")
        self.lab_delivery = QLabel("-")
        self.lab_total = QLabel("-")
        self.lab_notes = QLabel("-")
        self.lab_notes.setWordWrap(True)
        f.addRow("Venta #:", self.lab_id)
        f.addRow("Fecha:", self.lab_date)
        f.addRow("Cliente:", self.lab_customer)
        f.addRow("Método de pago:", self.lab_method)
        f.addRow("Estado:", self.lab_status)
        f.addRow("Descuento:", self.lab_discount)
        f.addRow("Impuesto:", self.lab_tax)
        f.addRow("Domicilio:", self.lab_delivery)
        f.addRow("Total:", self.lab_total)
        f.addRow("Notas:", self.lab_notes)

        self.items_model = SaleItemsTableModel()
        self.tbl_items = TableView()
        self.tbl_items.setModel(self.items_model)

        root = QVBoxLayout(self)
        root.addWidget(self.box)
        root.addWidget(self.tbl_items, 1)

    def clear(self) -> None:
        for lab in (
            self.lab_id, self.lab_date, self.lab_customer, self.lab_method, self.lab_status,
            self.lab_discount, self.lab_tax, self.lab_delivery, self.lab_total, self.lab_notes,
        ):
            lab.setText("-")
        self.items_model.replace([])

    def set_data(self, row, items) -> None:
        if row is None:
            self.clear()
            return
        self.lab_id.setText(str(row["sale_id"]))
        self.lab_date.setText(format_date_display(row["sale_date"]))
        self.lab_customer.setText(row["customer_name"])
        self.lab_method.setText(PAYMENT_LABELS.get(row["payment_method"], row["payment_method"]))
        self.lab_status.setText(STATUS_LABELS.get(row["status"], row["status"]))
        self.lab_discount.setText(fmt_cop(row["discount_amount"]))
        self.lab_tax.setText(fmt_cop(row["tax_amount"]))
        self.lab_delivery.setText(fmt_cop(row["delivery_fee"]))
        self.lab_total.setText(fmt_cop(row["total_amount"]))
        self.lab_notes.setText(row["notes"] or "-")
        self.items_model.replace(list(items))
        self.tbl_items.resizeColumnsToContents()
