# magia_interna/modules/login/controller.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from ...config import AppConfig
from ...utils.auth import check_credentials
from ...utils.session import Session

_log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credenciales incorrectas"


class LoginController:
    """
    Login flow against the configured credentials.

    Public attrs (set after each attempt):
      - last_error_code: str | None
      - last_error_message: str | None
      - last_username: str | None
    """

    def __init__(self, config: AppConfig, session: Session, parent=None, form_factory: Optional[Callable] = None) -> None:
        self.config = config
        self.session = session
        self.parent = parent
        self._form_factory = form_factory

        self.last_error_code: Optional[str] = None
        self.last_error_message: Optional[str] = None
        self.last_username: Optional[str] = None

    # ----------------------------- Public API -----------------------------

    def login(self, username: str, password: str) -> bool:
        """Check credentials; on success the session becomes authenticated."""
        self._reset_last_error()
        self.last_username = (username or "").strip()
        if not self.last_username or not password:
            self._fail("empty_fields", "Ingrese usuario y contraseña.")
            return False
        if not check_credentials(self.config, self.last_username, password):
            self._fail("invalid", INVALID_CREDENTIALS)
            _log.warning("Failed login for %r", self.last_username)
            return False
        # usernames match case-insensitively; store the configured spelling
        self.session.login(self.config.login_username)
        _log.info("User %r logged in", self.last_username)
        return True

    def prompt(self) -> bool:
        """
        Show the dialog until the user signs in or cancels. Failed attempts
        are not limited. Returns True when the session is authenticated.
        """
        message = ""
        while True:
            dlg = self._make_form(message)
            if not dlg.exec():
                self._fail("cancelled", "Inicio de sesión cancelado.")
                return False
            if self.login(*dlg.get_values()):
                return True
            message = self.last_error_message or INVALID_CREDENTIALS

    def logout(self) -> None:
        _log.info("User %r logged out", self.session.username)
        self.session.clear()

    # ----------------------------- Internals -----------------------------

    def _make_form(self, message: str):
        if self._form_factory is not None:
            return self._form_factory(self.parent, message)
        from .form import LoginForm  # lazy import to keep UI deps local
        return LoginForm(self.parent, message)

    def _reset_last_error(self) -> None:
        self.last_error_code = None
        self.last_error_message = None

    def _fail(self, code: str, message: str) -> None:
        self.last_error_code = code
        self.last_error_message = message
