from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QDialog, QMessageBox, QWidget

from ..base_module import BaseModule
from .form import CustomerForm
from .model import CustomersTableModel
from .view import CustomerView
from ...database.repositories.customers_repo import CustomersRepo
from ...utils import ui_helpers as ui

_log = logging.getLogger(__name__)


class CustomerController(BaseModule):
    """Customer list with details panel; create, edit and delete via CustomerForm."""

    def __init__(self, conn):
        super().__init__()
        self.conn = conn
        self.repo = CustomersRepo(conn)
        self.view = CustomerView()
        self.model = CustomersTableModel([])
        self.view.table.setModel(self.model)

        self.view.btn_add.clicked.connect(self._on_add)
        self.view.btn_edit.clicked.connect(self._on_edit)
        self.view.btn_del.clicked.connect(self._on_delete)
        self.view.table.doubleClicked.connect(lambda _=None: self._on_edit())
        self.view.search.textChanged.connect(lambda _=None: self._reload())
        self.view.chk_show_inactive.toggled.connect(lambda _=None: self._reload())
        self.view.table.selectionModel().selectionChanged.connect(self._update_details)

        self._sc_add = QShortcut(QKeySequence("Ctrl+N"), self.view)
        self._sc_edit = QShortcut(QKeySequence("Ctrl+E"), self.view)
        self._sc_del = QShortcut(QKeySequence("Delete"), self.view)
        for sc in (self._sc_add, self._sc_edit, self._sc_del):
            sc.setContext(Qt.WidgetWithChildrenShortcut)
        self._sc_add.activated.connect(self._on_add)
        self._sc_edit.activated.connect(self._on_edit)
        self._sc_del.activated.connect(self._on_delete)

        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload()

    # ------------------------------------------------------------------

    def _reload(self) -> None:
        rows = self.repo.list_customers(
            search=self.view.search_text or None,
            active_only=not self.view.chk_show_inactive.isChecked(),
        )
        self.model.replace(rows)
        self.view.table.resizeColumnsToContents()
        if rows:
            self.view.table.selectRow(0)
        self._update_details()

    def _selected_id(self) -> Optional[int]:
        return self.view.table.selected_id()

    def _update_details(self, *_args) -> None:
        row = self.view.table.selected_row()
        self.view.details.set_data(self.model.at(row) if row is not None else None)

    # ------------------------------------------------------------------

    def _on_add(self) -> None:
        dlg = CustomerForm(self.view)
        if dlg.exec() != QDialog.Accepted:
            return
        try:
            cid = self.repo.create(dlg.payload())
            _log.info("Customer %s created", cid)
            self._reload()
            ui.info(self.view, "Guardado", f"Cliente #{cid} creado.")
        except Exception as e:
            self._handle_error("No se pudo crear el cliente", e)

    def _on_edit(self) -> None:
        cid = self._selected_id()
        if cid is None:
            ui.info(self.view, "Seleccionar", "Seleccione un cliente para editar.")
            return
        current = self.repo.get(cid)
        if current is None:
            ui.info(self.view, "No encontrado", "El cliente seleccionado ya no existe.")
            self._reload()
            return
        dlg = CustomerForm(self.view, initial=asdict(current))
        if dlg.exec() != QDialog.Accepted:
            return
        try:
            self.repo.update(cid, dlg.payload())
            self._reload()
            ui.info(self.view, "Guardado", f"Cliente #{cid} actualizado.")
        except Exception as e:
            self._handle_error("No se pudo actualizar el cliente", e)

    def _on_delete(self) -> None:
        cid = self._selected_id()
        if cid is None:
            ui.info(self.view, "Seleccionar", "Seleccione un cliente para eliminar.")
            return
        resp = QMessageBox.question(
            self.view,
            "Eliminar",
            f"¿Eliminar el cliente #{cid}?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if resp != QMessageBox.StandardButton.Yes:
            return
        try:
            self.repo.delete(cid)
            self._reload()
            ui.info(self.view, "Eliminado", "Cliente eliminado.")
        except Exception as e:
            self._handle_error("No se pudo eliminar el cliente", e)
