"""
Controller for the product catalog.

Wires ProductsRepo <-> ProductsTableModel <-> ProductView and connects
Nuevo/Editar/Eliminar to ProductForm. Products that already appear in
sales are deactivated instead of deleted.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QDialog, QMessageBox, QWidget

from ..base_module import BaseModule
from .view import ProductView
from .form import ProductForm
from .model import ProductsTableModel
from ...database.repositories.products_repo import ProductsRepo
from ...utils import ui_helpers as ui

_log = logging.getLogger(__name__)


class ProductController(BaseModule):
    def __init__(self, conn):
        super().__init__()
        self.conn = conn
        self.repo = ProductsRepo(conn)
        self.view = ProductView()
        self.model = ProductsTableModel([])
        self.view.table.setModel(self.model)

        self.view.btn_add.clicked.connect(self._on_add)
        self.view.btn_edit.clicked.connect(self._on_edit)
        self.view.btn_del.clicked.connect(self._on_delete)
        self.view.table.doubleClicked.connect(lambda _=None: self._on_edit())
        self.view.search.textChanged.connect(lambda _=None: self._reload())
        self.view.cmb_category.currentIndexChanged.connect(lambda _=None: self._reload())
        self.view.chk_active_only.toggled.connect(lambda _=None: self._reload())

        self._sc_add = QShortcut(QKeySequence("Ctrl+N"), self.view)
        self._sc_edit = QShortcut(QKeySequence("Ctrl+E"), self.view)
        self._sc_del = QShortcut(QKeySequence("Delete"), self.view)
        for sc in (self._sc_add, self._sc_edit, self._sc_del):
            sc.setContext(Qt.WidgetWithChildrenShortcut)
        self._sc_add.activated.connect(self._on_add)
        self._sc_edit.activated.connect(self._on_edit)
        self._sc_del.activated.connect(self._on_delete)

        self.refresh()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._load_categories()
        self._reload()

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------
    def _load_categories(self) -> None:
        current = self.view.selected_category
        cmb = self.view.cmb_category
        cmb.blockSignals(True)
        cmb.clear()
        cmb.addItem("(Todas)", userData=None)
        for c in self.repo.categories():
            cmb.addItem(c, userData=c)
        idx = cmb.findData(current) if current else 0
        cmb.setCurrentIndex(max(idx, 0))
        cmb.blockSignals(False)

    def _reload(self) -> None:
        rows = self.repo.list_products(
            search=self.view.search_text or None,
            category=self.view.selected_category,
            active_only=self.view.chk_active_only.isChecked(),
        )
        self.model.replace(rows)
        self.view.table.resizeColumnsToContents()
        self.view.lbl_summary.setText(
            f"{len(rows)} producto(s) · {self.repo.units_in_stock()} unidades en inventario"
        )
        self._reload_low_stock()

    def _reload_low_stock(self) -> None:
        lst = self.view.lst_low_stock
        lst.clear()
        for p in self.repo.low_stock():
            lst.addItem(f"{p.name} ({p.sku}): {p.stock_quantity} / mín. {p.min_stock}")
        if lst.count() == 0:
            lst.addItem("Sin alertas de stock")

    def _selected_id(self) -> Optional[int]:
        return self.view.table.selected_id()

    # ------------------------------------------------------------------
    # Button handlers
    # ------------------------------------------------------------------
    def _on_add(self) -> None:
        dlg = ProductForm(self.view, categories=self.repo.categories())
        if dlg.exec() != QDialog.Accepted:
            return
        payload = dlg.payload()
        try:
            pid = self.repo.create(payload)
            _log.info("Product %s created (%s)", pid, payload["sku"])
            self.refresh()
            ui.info(self.view, "Guardado", f"Producto #{pid} creado.")
        except Exception as e:
            self._handle_error("No se pudo crear el producto", e)

    def _on_edit(self) -> None:
        pid = self._selected_id()
        if pid is None:
            ui.info(self.view, "Seleccionar", "Seleccione un producto para editar.")
            return
        current = self.repo.get(pid)
        if current is None:
            ui.info(self.view, "No encontrado", "El producto seleccionado ya no existe.")
            self._reload()
            return
        dlg = ProductForm(self.view, categories=self.repo.categories(), initial=asdict(current))
        if dlg.exec() != QDialog.Accepted:
            return
        try:
            self.repo.update(pid, dlg.payload())
            self.refresh()
            ui.info(self.view, "Guardado", f"Producto #{pid} actualizado.")
        except Exception as e:
            self._handle_error("No se pudo actualizar el producto", e)

    def _on_delete(self) -> None:
        pid = self._selected_id()
        if pid is None:
            ui.info(self.view, "Seleccionar", "Seleccione un producto para eliminar.")
            return
        resp = QMessageBox.question(
            self.view,
            "Eliminar",
            f"¿Eliminar el producto #{pid}?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if resp != QMessageBox.StandardButton.Yes:
            return
        try:
            self.repo.delete(pid)
            self.refresh()
            ui.info(self.view, "Eliminado", "Producto eliminado.")
        except Exception as e:
            self._handle_error("No se pudo eliminar el producto", e)
