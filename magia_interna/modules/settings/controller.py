from __future__ import annotations

import logging
import sqlite3

from PySide6.QtWidgets import QMessageBox, QWidget

from ..base_module import BaseModule
from .view import SettingsView
from ...database.repositories.settings_repo import SettingsRepo
from ...utils import ui_helpers as ui
from ...utils.session import Session
from ...utils.validators import looks_like_email, non_empty

_log = logging.getLogger(__name__)


class SettingsController(BaseModule):
    """Company data and preferences (app_settings) plus the session's Christmas mode."""

    def __init__(self, conn: sqlite3.Connection, session: Session):
        super().__init__()
        self.conn = conn
        self.session = session
        self.repo = SettingsRepo(conn)
        self.view = SettingsView()

        self.view.btn_save.clicked.connect(self._save)
        self.view.btn_reset.clicked.connect(self._reset)
        self.view.chk_christmas.toggled.connect(self._on_christmas_toggled)
        self.refresh()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self.view.set_values(self.repo.get_all())
        self.view.chk_christmas.blockSignals(True)
        self.view.chk_christmas.setChecked(self.session.christmas_mode)
        self.view.chk_christmas.blockSignals(False)

    def _on_christmas_toggled(self, on: bool) -> None:
        self.session.set_christmas_mode(on)
        _log.info("Christmas mode %s", "on" if on else "off")

    def _save(self) -> None:
        values = self.view.values()
        if not non_empty(values["company_name"]):
            ui.error(self.view, "Datos no válidos", "El nombre de la empresa es obligatorio.")
            return
        if values["company_email"] and not looks_like_email(values["company_email"]):
            ui.error(self.view, "Datos no válidos", "El e-mail de la empresa no parece válido.")
            return
        try:
            self.repo.save(values)
        except Exception as e:
            self._handle_error("No se pudo guardar la configuración", e)
            return
        _log.info("Settings saved")
        ui.info(self.view, "Guardado", "Configuración guardada correctamente.")

    def _reset(self) -> None:
        resp = QMessageBox.question(
            self.view,
            "Restablecer",
            "¿Restablecer todos los ajustes a sus valores por defecto?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if resp != QMessageBox.StandardButton.Yes:
            return
        try:
            self.repo.reset()
        except Exception as e:
            self._handle_error("No se pudo restablecer la configuración", e)
            return
        self.refresh()
