from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QListWidget,
    QListWidgetItem,
    QStackedWidget,
    QLabel,
    QHBoxLayout,
    QSizePolicy,
)
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt
from pathlib import Path
import logging
import sys
from importlib import import_module

from .config import AppConfig, ConfigError, ensure_data_dir
from .constants import APP_NAME, CHRISTMAS_STYLE_FILE, STYLE_FILE
from .database import get_connection
from .modules.base_module import BaseModule
from .modules.login.controller import LoginController
from .utils.loggers import get_logger
from .utils.session import Session
from .utils.ui_helpers import wrap_center

_log = logging.getLogger(__name__)

NOT_FOUND_TEXT = "Página no encontrada"


def load_qss(christmas: bool = False) -> str:
    base = Path(__file__).resolve().parent
    parts = []
    for name in (STYLE_FILE, CHRISTMAS_STYLE_FILE if christmas else None):
        if name and (base / name).exists():
            parts.append((base / name).read_text(encoding="utf-8"))
    return "\n".join(parts)


def _lazy_get(name: str, attr: str):
    """Import a module by name and fetch an attribute from it, with a clear error if missing."""
    try:
        mod = import_module(name)
    except Exception as e:
        raise ImportError(f"Failed to import module '{name}': {e}") from e
    try:
        return getattr(mod, attr)
    except AttributeError as e:
        raise ImportError(f"'{attr}' not found in module '{name}'.") from e


class MainWindow(QMainWindow):
    def __init__(self, conn, session: Session, login: LoginController | None = None):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.setWindowFlag(Qt.WindowMinimizeButtonHint, True)
        self.setWindowFlag(Qt.WindowMaximizeButtonHint, True)
        self.setMinimumSize(900, 560)

        self.conn = conn
        self.session = session
        self.login = login

        # ---- Central layout: left nav + stacked pages ----
        central = QWidget(self)
        layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        self.nav = QListWidget()
        self.nav.setObjectName("nav")
        self.nav.setFixedWidth(140)
        self.nav.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)

        self.stack = QStackedWidget()

        row = QWidget()
        row_lay = QHBoxLayout(row)
        row_lay.addWidget(self.nav)
        row_lay.addWidget(self.stack, 1)
        layout.addWidget(row, 1)

        # screen info for lazy loading, by nav index
        self.module_info: list[dict] = []
        # loaded controllers, by nav index (None when loading failed)
        self.modules: dict[int, BaseModule | None] = {}

        self.nav.currentRowChanged.connect(self._on_nav_item_changed)

        self._add_module_deferred("Dashboard", "magia_interna.modules.dashboard.controller",
                                  "DashboardController", self.conn)
        self._add_module_deferred("Productos", "magia_interna.modules.product.controller",
                                  "ProductController", self.conn)
        self._add_module_deferred("Clientes", "magia_interna.modules.customer.controller",
                                  "CustomerController", self.conn)
        self._add_module_deferred("Ventas", "magia_interna.modules.sales.controller",
                                  "SalesController", self.conn)
        self._add_module_deferred("Gastos", "magia_interna.modules.expense.controller",
                                  "ExpenseController", self.conn)
        self._add_module_deferred("Analytics", "magia_interna.modules.analytics.controller",
                                  "AnalyticsController", self.conn)
        self._add_module_deferred("Cumpleaños", "magia_interna.modules.birthdays.controller",
                                  "BirthdaysController", self.conn)
        self._add_module_deferred("Promociones", "magia_interna.modules.promotions.controller",
                                  "PromotionsController", self.conn)
        self._add_module_deferred("Configuración", "magia_interna.modules.settings.controller",
                                  "SettingsController", self.conn, session=self.session)

        # not in the nav; shown by open_screen() for unknown keys
        self.not_found_page = wrap_center(QLabel(NOT_FOUND_TEXT))
        self.stack.addWidget(self.not_found_page)

        self._build_menu()
        self.session.subscribe(self._on_session_changed)
        self._update_title()

        if self.nav.count():
            self.nav.setCurrentRow(0)

    # ---------- menu ----------
    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("Sesión")
        self.act_logout = QAction("Cerrar sesión", self)
        self.act_logout.triggered.connect(self._logout)
        menu.addAction(self.act_logout)
        act_quit = QAction("Salir", self)
        act_quit.triggered.connect(self.close)
        menu.addAction(act_quit)

    def _logout(self) -> None:
        if self.login is None:
            return
        self.login.logout()
        self.hide()
        if self.login.prompt():
            self.show()
        else:
            QApplication.quit()

    # ---------- session ----------
    def _on_session_changed(self, session: Session) -> None:
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(load_qss(session.christmas_mode))
        self._update_title()

    def _update_title(self) -> None:
        user = self.session.username
        self.setWindowTitle(f"{APP_NAME} - {user}" if user else APP_NAME)

    # ---------- navigation ----------
    def open_screen(self, title: str) -> None:
        """Show the screen with that nav title, or the not-found page."""
        idx = self._find_module_info_index(title)
        if idx is None:
            _log.warning("Unknown screen %r", title)
            self.nav.blockSignals(True)
            self.nav.clearSelection()
            self.nav.setCurrentRow(-1)
            self.nav.blockSignals(False)
            self.stack.setCurrentWidget(self.not_found_page)
            return
        if self.nav.currentRow() == idx:
            self._load_module_at_index(idx)
        else:
            self.nav.setCurrentRow(idx)

    def _find_module_info_index(self, title: str) -> int | None:
        for i, info in enumerate(self.module_info):
            if info.get("title") == title:
                return i
        return None

    def _open_new_sale(self) -> None:
        self.open_screen("Ventas")
        ctrl = self.modules.get(self._find_module_info_index("Ventas"))
        if ctrl is not None:
            ctrl.new_sale()

    # ---------- deferred loading ----------
    def _add_module_deferred(
        self,
        title: str,
        module_path: str,
        class_name: str,
        *args,
        fallback_placeholder: bool = True,
        **kwargs
    ):
        """Add module info for deferred loading."""
        self.module_info.append({
            'title': title,
            'module_path': module_path,
            'class_name': class_name,
            'args': args,
            'kwargs': kwargs,
            'fallback_placeholder': fallback_placeholder,
        })
        self.stack.addWidget(wrap_center(QLabel(f"Cargando {title}...")))
        self.nav.addItem(QListWidgetItem(title))

    def _on_nav_item_changed(self, index: int):
        """Load module when navigating to it."""
        if index < 0 or index >= len(self.module_info):
            return
        self._load_module_at_index(index)

    def _load_module_at_index(self, index: int):
        """Load the module at the specified index if needed, then show it."""
        if index in self.modules:
            ctrl = self.modules[index]
            if ctrl is not None:
                try:
                    ctrl.refresh()
                except Exception:
                    _log.exception("Refreshing %s failed", self.module_info[index]['title'])
        else:
            self._load_module(index)
        self.stack.setCurrentIndex(index)

    def _load_module(self, index: int):
        if index in self.modules or index >= len(self.module_info):
            return
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            self._load_normal_module(index)
        finally:
            QApplication.restoreOverrideCursor()

    def _load_normal_module(self, index: int):
        module_info = self.module_info[index]
        try:
            Controller = _lazy_get(module_info['module_path'], module_info['class_name'])
            controller = Controller(*module_info['args'], **module_info['kwargs'])
        except Exception:
            _log.exception("%s failed to load", module_info['title'])
            self.modules[index] = None
            if module_info['fallback_placeholder']:
                self._replace_placeholder_widget(index, f"{module_info['title']}\n\nNo se pudo cargar")
            return

        self._swap_widget(index, controller.get_widget())
        self.modules[index] = controller
        self._wire(module_info['title'], controller)

    def _wire(self, title: str, controller) -> None:
        if title == "Dashboard":
            controller.navigate.connect(self.open_screen)
            controller.open_create_sale.connect(self._open_new_sale)

    def _swap_widget(self, index: int, widget: QWidget) -> None:
        current = self.stack.widget(index)
        self.stack.removeWidget(current)
        current.deleteLater()
        self.stack.insertWidget(index, widget)

    def _replace_placeholder_widget(self, index: int, message: str):
        self._swap_widget(index, wrap_center(QLabel(message)))


def main():
    log = get_logger()

    try:
        config = AppConfig.from_env()
    except ConfigError as e:
        log.error("Cannot start %s: %s", APP_NAME, e)
        sys.exit(2)

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    ensure_data_dir()
    conn = get_connection(config.db_path)

    session = Session(config.session_path).load()
    app.setStyleSheet(load_qss(session.christmas_mode))

    login = LoginController(config, session)
    if not session.authenticated or session.username != config.login_username:
        if not login.prompt():
            log.info("Login not completed, exiting")
            conn.close()
            sys.exit(0)

    win = MainWindow(conn, session, login)
    win.resize(1100, 700)
    win.show()

    code = app.exec()
    conn.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
