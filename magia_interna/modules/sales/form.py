"""
Sale entry dialog.

A QTableWidget of lines edited through a SaleDraft: choosing a product
prefills its list price, quantity and price changes recompute the line
total, and the grand total follows

    Σ line totals + tax + delivery − discount

Lines asking for more than the known stock are painted red and the OK
button stays disabled. On accept, `payload()` returns
{"header": SaleHeader, "items": [SaleItem, ...]} for SalesRepo.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QBrush, QColor
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ...constants import ANONYMOUS_CUSTOMER_NAME, PAYMENT_METHODS
from ...database.repositories.customers_repo import Customer
from ...database.repositories.products_repo import Product
from ...database.repositories.sales_repo import SaleHeader
from ...utils.helpers import fmt_cop
from ...widgets.money_edit import MoneyEdit
from .composer import SaleDraft, SaleValidationError

_WARN = QColor("#fde2e4")


class SaleForm(QDialog):
    COL_PRODUCT, COL_STOCK, COL_QTY, COL_PRICE, COL_TOTAL, COL_REMOVE = range(6)
    HEADERS = ["Producto", "Disponible", "Cantidad", "Precio unitario", "Total", ""]

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        products: Iterable[Product],
        customers: Iterable[Customer],
        stock: Mapping[int, int],
        initial_header: Optional[SaleHeader] = None,
        initial_items: Iterable[Mapping] = (),
    ):
        super().__init__(parent)
        self.setModal(True)
        self.resize(860, 560)
        self._products = list(products)
        self._sale_id = initial_header.sale_id if initial_header else None
        self.setWindowTitle(f"Editar venta #{self._sale_id}" if self._sale_id else "Nueva venta")

        prices = {p.product_id: p.price for p in self._products}
        if initial_header is not None:
            self.draft = SaleDraft.from_existing(initial_header, initial_items, stock, prices)
        else:
            self.draft = SaleDraft(stock=dict(stock), prices=prices)

        # --- Header fields ------------------------------------------------
        self.cmb_customer = QComboBox()
        self.cmb_customer.addItem(ANONYMOUS_CUSTOMER_NAME, None)
        for c in customers:
            self.cmb_customer.addItem(c.name, c.customer_id)

        self.cmb_payment = QComboBox()
        for key, label in PAYMENT_METHODS:
            self.cmb_payment.addItem(label, key)

        self.date_edit = QDateEdit()
        self.date_edit.setDisplayFormat("dd/MM/yyyy")
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDate(QDate.currentDate())

        self.edt_notes = QLineEdit()

        head = QFormLayout()
        head.addRow("Cliente", self.cmb_customer)
        head.addRow("Método de pago", self.cmb_payment)
        head.addRow("Fecha", self.date_edit)
        head.addRow("Notas", self.edt_notes)

        # --- Lines ---------------------------------------------------------
        self.tbl = QTableWidget(0, len(self.HEADERS))
        self.tbl.setHorizontalHeaderLabels(self.HEADERS)
        self.tbl.verticalHeader().setVisible(False)
        self.tbl.setSelectionBehavior(QTableWidget.SelectRows)
        self.tbl.horizontalHeader().setSectionResizeMode(self.COL_PRODUCT, QHeaderView.Stretch)

        self.btn_add_line = QPushButton("Agregar producto")
        self.btn_add_line.clicked.connect(lambda: self.add_line())

        # --- Adjustments + totals ------------------------------------------
        self.edt_discount = MoneyEdit()
        self.edt_tax = MoneyEdit()
        self.edt_delivery = MoneyEdit()
        for w in (self.edt_discount, self.edt_tax, self.edt_delivery):
            w.valueChanged.connect(self._on_adjustments_changed)

        self.lbl_subtotal = QLabel(fmt_cop(0))
        self.lbl_total = QLabel(fmt_cop(0))
        self.lbl_total.setStyleSheet("font-weight:bold; font-size:14px;")

        totals = QFormLayout()
        totals.addRow("Subtotal", self.lbl_subtotal)
        totals.addRow("Descuento", self.edt_discount)
        totals.addRow("Impuesto", self.edt_tax)
        totals.addRow("Domicilio", self.edt_delivery)
        totals.addRow("Total", self.lbl_total)

        self.lbl_error = QLabel("")
        self.lbl_error.setStyleSheet("color:#b00020;")
        self.lbl_error.setVisible(False)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.button(QDialogButtonBox.Ok).setText("Guardar venta")
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

        bottom = QHBoxLayout()
        bottom.addWidget(self.btn_add_line, 0, Qt.AlignTop)
        bottom.addStretch(1)
        bottom.addLayout(totals)

        root = QVBoxLayout(self)
        root.addLayout(head)
        root.addWidget(self.tbl, 1)
        root.addLayout(bottom)
        root.addWidget(self.lbl_error)
        root.addWidget(self.buttons)

        # --- Prefill -------------------------------------------------------
        if initial_header is not None:
            idx = self.cmb_customer.findData(initial_header.customer_id)
            self.cmb_customer.setCurrentIndex(max(idx, 0))
            idx = self.cmb_payment.findData(initial_header.payment_method)
            self.cmb_payment.setCurrentIndex(max(idx, 0))
            qd = QDate.fromString(str(initial_header.sale_date)[:10], "yyyy-MM-dd")
            if qd.isValid():
                self.date_edit.setDate(qd)
            self.edt_notes.setText(initial_header.notes or "")
            for w, v in (
                (self.edt_discount, self.draft.discount_amount),
                (self.edt_tax, self.draft.tax_amount),
                (self.edt_delivery, self.draft.delivery_fee),
            ):
                w.blockSignals(True)
                w.setValue(v)
                w.blockSignals(False)
            for i in range(len(self.draft.lines)):
                self._insert_row_widgets(i)
        else:
            self.add_line()

        self._payload: Optional[dict] = None
        self._refresh_totals()

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------
    def add_line(self, product_id: Optional[int] = None, quantity: int = 1) -> int:
        """Append a line (optionally preselected) and return its row index."""
        self.draft.add_line(product_id, quantity)
        row = len(self.draft.lines) - 1
        self._insert_row_widgets(row)
        self._refresh_totals()
        return row

    def _insert_row_widgets(self, row: int) -> None:
        line = self.draft.lines[row]
        self.tbl.insertRow(row)

        cmb = QComboBox()
        cmb.addItem("Seleccione un producto…", None)
        for p in self._products:
            cmb.addItem(f"{p.name} ({p.sku})", p.product_id)
        cmb.setCurrentIndex(max(cmb.findData(line.product_id), 0))
        cmb.currentIndexChanged.connect(lambda _=None, w=cmb: self._on_product_changed(w))
        self.tbl.setCellWidget(row, self.COL_PRODUCT, cmb)

        spin = QSpinBox()
        spin.setRange(1, 1_000_000)
        spin.setValue(line.quantity)
        spin.valueChanged.connect(lambda v, w=spin: self._on_quantity_changed(w, v))
        self.tbl.setCellWidget(row, self.COL_QTY, spin)

        price = MoneyEdit(value=line.unit_price)
        price.valueChanged.connect(lambda v, w=price: self._on_price_changed(w, v))
        self.tbl.setCellWidget(row, self.COL_PRICE, price)

        for col in (self.COL_STOCK, self.COL_TOTAL):
            item = QTableWidgetItem("")
            item.setFlags(item.flags() & ~Qt.ItemIsEditable)
            item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.tbl.setItem(row, col, item)

        btn = QPushButton("✕")
        btn.setToolTip("Quitar línea")
        btn.clicked.connect(lambda _=False, w=btn: self._on_remove(w))
        self.tbl.setCellWidget(row, self.COL_REMOVE, btn)

        self._refresh_row(row)

    def _row_of(self, widget: QWidget, col: int) -> int:
        for r in range(self.tbl.rowCount()):
            if self.tbl.cellWidget(r, col) is widget:
                return r
        return -1

    def _on_product_changed(self, cmb: QComboBox) -> None:
        row = self._row_of(cmb, self.COL_PRODUCT)
        if row < 0:
            return
        line = self.draft.set_product(row, cmb.currentData())
        price = self.tbl.cellWidget(row, self.COL_PRICE)
        price.blockSignals(True)
        price.setValue(line.unit_price)
        price.blockSignals(False)
        self._refresh_row(row)
        self._refresh_totals()

    def _on_quantity_changed(self, spin: QSpinBox, value: int) -> None:
        row = self._row_of(spin, self.COL_QTY)
        if row < 0:
            return
        self.draft.set_quantity(row, value)
        self._refresh_row(row)
        self._refresh_totals()

    def _on_price_changed(self, edit: MoneyEdit, value: float) -> None:
        row = self._row_of(edit, self.COL_PRICE)
        if row < 0:
            return
        self.draft.set_unit_price(row, value)
        self._refresh_row(row)
        self._refresh_totals()

    def _on_remove(self, btn: QPushButton) -> None:
        row = self._row_of(btn, self.COL_REMOVE)
        if row < 0:
            return
        self.draft.remove_line(row)
        self.tbl.removeRow(row)
        self._refresh_totals()

    def _on_adjustments_changed(self, *_args) -> None:
        self.draft.set_adjustments(
            discount=self.edt_discount.value(),
            tax=self.edt_tax.value(),
            delivery=self.edt_delivery.value(),
        )
        self._refresh_totals()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def _refresh_row(self, row: int) -> None:
        line = self.draft.lines[row]
        have = self.draft.available(line.product_id)
        short = self.draft.has_insufficient_stock(line)
        stock_item = self.tbl.item(row, self.COL_STOCK)
        total_item = self.tbl.item(row, self.COL_TOTAL)
        stock_item.setText("-" if have is None else str(have))
        total_item.setText(fmt_cop(line.total_price))
        bg = QBrush(_WARN) if short else QBrush()
        stock_item.setBackground(bg)
        total_item.setBackground(bg)
        stock_item.setToolTip("Stock insuficiente" if short else "")

    def _refresh_totals(self) -> None:
        self.lbl_subtotal.setText(fmt_cop(self.draft.subtotal()))
        self.lbl_total.setText(fmt_cop(self.draft.total()))
        blocked = any(self.draft.has_insufficient_stock(ln) for ln in self.draft.lines)
        self.buttons.button(QDialogButtonBox.Ok).setEnabled(bool(self.draft.lines) and not blocked)

    # ------------------------------------------------------------------
    # Validation & payload
    # ------------------------------------------------------------------
    def _fail(self, message: str) -> None:
        self.lbl_error.setText(message)
        self.lbl_error.setVisible(True)

    def get_payload(self) -> dict | None:
        self.lbl_error.setVisible(False)
        try:
            header, items = self.draft.to_payload(
                customer_id=self.cmb_customer.currentData(),
                payment_method=self.cmb_payment.currentData(),
                sale_date=self.date_edit.date().toString("yyyy-MM-dd"),
                notes=self.edt_notes.text(),
                sale_id=self._sale_id,
            )
        except SaleValidationError as e:
            self._fail(str(e))
            if e.line is not None:
                self.tbl.selectRow(e.line)
            return None
        return {"header": header, "items": items}

    def accept(self) -> None:  # type: ignore[override]
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self) -> dict | None:
        return self._payload
