"""
Controller for the sales screen.

New and edited sales go through SaleForm (a SaleDraft underneath) and are
written by SalesRepo, which takes stock atomically; a sale that no longer
fits the stock is rejected with InsufficientStockError and nothing is
written. Cancelling or deleting a sale gives its units back.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QDialog, QMessageBox, QWidget

from ..base_module import BaseModule
from .form import SaleForm
from .model import SalesTableModel
from .receipt import RECEIPT_TEMPLATE, receipt_context
from .view import SalesView
from ...database.repositories.customers_repo import CustomersRepo
from ...database.repositories.products_repo import ProductsRepo
from ...database.repositories.sales_repo import SalesRepo
from ...utils import ui_helpers as ui
from ...utils.helpers import fmt_cop
from ...widgets.receipt_preview import HtmlPreviewDialog

_log = logging.getLogger(__name__)


class SalesController(BaseModule):
    def __init__(self, conn):
        super().__init__()
        self.conn = conn
        self.repo = SalesRepo(conn)
        self.products = ProductsRepo(conn)
        self.customers = CustomersRepo(conn)

        self.view = SalesView()
        self.model = SalesTableModel([])
        self.view.tbl.setModel(self.model)

        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_edit.clicked.connect(self._edit)
        self.view.btn_cancel.clicked.connect(self._cancel)
        self.view.btn_del.clicked.connect(self._delete)
        self.view.btn_receipt.clicked.connect(self._receipt)
        self.view.search.textChanged.connect(lambda _=None: self._reload())
        self.view.tbl.doubleClicked.connect(lambda _=None: self._receipt())
        self.view.tbl.selectionModel().selectionChanged.connect(self._update_details)

        self._sc_add = QShortcut(QKeySequence("Ctrl+N"), self.view)
        self._sc_edit = QShortcut(QKeySequence("Ctrl+E"), self.view)
        self._sc_print = QShortcut(QKeySequence("Ctrl+P"), self.view)
        for sc in (self._sc_add, self._sc_edit, self._sc_print):
            sc.setContext(Qt.WidgetWithChildrenShortcut)
        self._sc_add.activated.connect(self._add)
        self._sc_edit.activated.connect(self._edit)
        self._sc_print.activated.connect(self._receipt)

        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload()

    # ------------------------------------------------------------------

    def _reload(self) -> None:
        rows = self.repo.list_sales(self.view.search_text)
        self.model.replace(rows)
        self.view.tbl.resizeColumnsToContents()
        if rows:
            self.view.tbl.selectRow(0)
        self._update_details()

    def _selected_id(self) -> Optional[int]:
        return self.view.tbl.selected_id()

    def _update_details(self, *_args) -> None:
        row = self.view.tbl.selected_row()
        if row is None:
            self.view.details.clear()
            return
        r = self.model.at(row)
        self.view.details.set_data(r, self.repo.list_items(r["sale_id"]))

    def _form_products(self, items=()):
        """Active products plus any product already on the sale being edited."""
        products = self.products.list_products(active_only=True)
        known = {p.product_id for p in products}
        for it in items:
            pid = int(it["product_id"])
            if pid not in known:
                p = self.products.get(pid)
                if p is not None:
                    products.append(p)
                    known.add(pid)
        return products

    def _form_customers(self, header=None):
        """Active customers plus the customer already on the sale being edited."""
        customers = self.customers.list_customers()
        cid = header.customer_id if header is not None else None
        if cid is not None and cid not in {c.customer_id for c in customers}:
            c = self.customers.get(cid)
            if c is not None and not c.is_anonymous:
                customers.append(c)
        return customers

    def new_sale(self) -> None:
        """Open the create-sale form (dashboard shortcut)."""
        self._add()

    # ------------------------------------------------------------------

    def _add(self) -> None:
        dlg = SaleForm(
            self.view,
            products=self._form_products(),
            customers=self._form_customers(),
            stock=self.products.stock_map(),
        )
        if dlg.exec() != QDialog.Accepted:
            return
        p = dlg.payload()
        try:
            sid = self.repo.create_sale(p["header"], p["items"])
        except Exception as e:
            self._handle_error("No se pudo registrar la venta", e)
            self._reload()
            return
        self._reload()
        msg = f"¡Venta #{sid} registrada! Total {fmt_cop(p['header'].total_amount)}"
        self.view.lbl_status.setText(msg)
        ui.info(self.view, "Venta registrada", msg)

    def _edit(self) -> None:
        sid = self._selected_id()
        if sid is None:
            ui.info(self.view, "Seleccionar", "Seleccione una venta para editar.")
            return
        header = self.repo.get_header(sid)
        if header is None:
            ui.info(self.view, "No encontrada", "La venta seleccionada ya no existe.")
            self._reload()
            return
        if header.status != "completed":
            ui.info(self.view, "No permitido", "Solo se pueden editar ventas completadas.")
            return
        items = self.repo.list_items(sid)
        dlg = SaleForm(
            self.view,
            products=self._form_products(items),
            customers=self._form_customers(header),
            stock=self.products.stock_map(),
            initial_header=header,
            initial_items=items,
        )
        if dlg.exec() != QDialog.Accepted:
            return
        p = dlg.payload()
        try:
            self.repo.update_sale(p["header"], p["items"])
        except Exception as e:
            self._handle_error("No se pudo actualizar la venta", e)
            self._reload()
            return
        self._reload()
        ui.info(self.view, "Guardado", f"Venta #{sid} actualizada.")

    def _confirm(self, title: str, text: str) -> bool:
        resp = QMessageBox.question(
            self.view, title, text,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        return resp == QMessageBox.StandardButton.Yes

    def _cancel(self) -> None:
        sid = self._selected_id()
        if sid is None:
            ui.info(self.view, "Seleccionar", "Seleccione una venta para anular.")
            return
        if not self._confirm("Anular", f"¿Anular la venta #{sid}? El stock será devuelto."):
            return
        try:
            self.repo.cancel_sale(sid)
            self._reload()
            ui.info(self.view, "Anulada", f"Venta #{sid} anulada.")
        except Exception as e:
            self._handle_error("No se pudo anular la venta", e)

    def _delete(self) -> None:
        sid = self._selected_id()
        if sid is None:
            ui.info(self.view, "Seleccionar", "Seleccione una venta para eliminar.")
            return
        if not self._confirm("Eliminar", f"¿Eliminar definitivamente la venta #{sid}?"):
            return
        try:
            self.repo.delete_sale(sid)
            self._reload()
            ui.info(self.view, "Eliminada", f"Venta #{sid} eliminada.")
        except Exception as e:
            self._handle_error("No se pudo eliminar la venta", e)

    def _receipt(self) -> None:
        sid = self._selected_id()
        if sid is None:
            ui.info(self.view, "Seleccionar", "Seleccione una venta para ver el recibo.")
            return
        try:
            ctx = receipt_context(self.conn, sid)
            dlg = HtmlPreviewDialog(RECEIPT_TEMPLATE, ctx, f"Recibo venta #{sid}", self.view)
        except Exception as e:
            self._handle_error("No se pudo generar el recibo", e)
            return
        dlg.exec()
