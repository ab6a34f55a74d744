from __future__ import annotations

import logging
import sqlite3

from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget

from ..database.repositories.errors import DomainError
from ..utils import ui_helpers as ui

_log = logging.getLogger(__name__)


class BaseModule(QObject):
    """
    A screen of the main window. Subclasses build `self.view` and
    implement get_widget(); `refresh()` is called when the screen is shown.
    """

    view: QWidget

    def get_widget(self) -> QWidget:
        raise NotImplementedError

    def refresh(self) -> None:
        pass

    # ------------------------------------------------------------------
    # Error mapping (consistent messages across controllers)
    # ------------------------------------------------------------------
    def _handle_error(self, context: str, err: Exception) -> None:
        title, msg = self._map_error(context, err)
        if isinstance(err, DomainError):
            _log.info("%s: %s", context, err)
        else:
            _log.error("%s: %s", context, err, exc_info=err)
        ui.error(self.view, title, msg)

    @staticmethod
    def _map_error(context: str, err: Exception) -> tuple[str, str]:
        if isinstance(err, DomainError):
            return "Datos no válidos", str(err)

        if isinstance(err, sqlite3.IntegrityError):
            raw = str(err).lower()
            if "unique" in raw:
                return "Ya existe", "Ya existe un registro con ese valor (por ejemplo, el SKU)."
            if "foreign key" in raw:
                return (
                    "No permitido",
                    "La acción viola una regla de datos (el registro está referenciado por otros).",
                )
            return "Restricción de datos", "La operación no cumple una regla de la base de datos. Revise los datos."

        if isinstance(err, sqlite3.Error):
            return "Error de base de datos", f"{context}. Inténtelo de nuevo."

        return "Error", f"{context}: {err}"
