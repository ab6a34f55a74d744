import pytest
from PySide6.QtWidgets import QLabel

from magia_interna.main import NOT_FOUND_TEXT, MainWindow, load_qss
from magia_interna.modules.settings.controller import SettingsController
from magia_interna.utils import ui_helpers
from magia_interna.utils.session import Session

SCREENS = ["Dashboard", "Productos", "Clientes", "Ventas", "Gastos",
           "Analytics", "Cumpleaños", "Promociones", "Configuración"]


@pytest.fixture()
def dialogs(monkeypatch):
    """Record message boxes instead of showing them."""
    shown = []
    monkeypatch.setattr(ui_helpers, "info", lambda parent, title, text: shown.append(("info", title)))
    monkeypatch.setattr(ui_helpers, "error", lambda parent, title, text: shown.append(("error", title)))
    return shown


@pytest.fixture()
def window(qtbot, conn, ids, tmp_path, dialogs):
    session = Session(tmp_path / "session.json")
    session.login("admin")
    win = MainWindow(conn, session)
    qtbot.addWidget(win)
    return win


def test_nav_lists_every_screen(window):
    assert [window.nav.item(i).text() for i in range(window.nav.count())] == SCREENS
    # Dashboard is loaded on startup
    assert window.modules.get(0) is not None


def test_every_screen_loads(window, dialogs):
    for i, title in enumerate(SCREENS):
        window.open_screen(title)
        assert window.stack.currentIndex() == i
        assert window.modules.get(i) is not None, title
    assert dialogs == []


def test_unknown_screen_shows_not_found(window):
    window.open_screen("Inventario")
    assert window.stack.currentWidget() is window.not_found_page
    assert NOT_FOUND_TEXT in [lbl.text() for lbl in window.not_found_page.findChildren(QLabel)]


def test_dashboard_kpi_navigates(window):
    dashboard = window.modules[0]
    dashboard.navigate.emit("Clientes")
    assert window.stack.currentIndex() == SCREENS.index("Clientes")


def test_christmas_mode_swaps_stylesheet(window, qapp):
    window.session.set_christmas_mode(True)
    assert qapp.styleSheet() == load_qss(True)
    assert "#b3121f" in qapp.styleSheet()
    window.session.set_christmas_mode(False)
    assert "#b3121f" not in qapp.styleSheet()


def test_title_shows_user(window):
    assert window.windowTitle().endswith("admin")


def test_settings_save_and_christmas_toggle(qtbot, conn, tmp_path, dialogs):
    session = Session(tmp_path / "session.json")
    ctrl = SettingsController(conn, session)
    qtbot.addWidget(ctrl.view)

    ctrl.view.company_name.setText("Magia Interna Norte")
    ctrl.view.default_low_stock_threshold.setValue(7)
    ctrl._save()
    assert dialogs == [("info", "Guardado")]
    assert ctrl.repo.get("company_name") == "Magia Interna Norte"
    assert ctrl.repo.get("default_low_stock_threshold") == 7

    ctrl.view.chk_christmas.setChecked(True)
    assert session.christmas_mode


def test_settings_require_company_name(qtbot, conn, tmp_path, dialogs):
    ctrl = SettingsController(conn, Session(tmp_path / "s.json"))
    qtbot.addWidget(ctrl.view)
    ctrl.view.company_name.setText("  ")
    ctrl._save()
    assert dialogs == [("error", "Datos no válidos")]
