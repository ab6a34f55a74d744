from __future__ import annotations

from PySide6.QtWidgets import (
    QCheckBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)


class SettingsView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.addWidget(QLabel("<h2>Configuración</h2>"))

        box_company = QGroupBox("Empresa")
        fc = QFormLayout(box_company)
        self.company_name = QLineEdit()
        self.company_email = QLineEdit()
        self.company_phone = QLineEdit()
        self.company_address = QLineEdit()
        fc.addRow("Nombre", self.company_name)
        fc.addRow("E-mail", self.company_email)
        fc.addRow("Teléfono", self.company_phone)
        fc.addRow("Dirección", self.company_address)
        root.addWidget(box_company)

        box_prefs = QGroupBox("Preferencias")
        fp = QFormLayout(box_prefs)
        self.currency = QLineEdit()
        self.currency.setReadOnly(True)
        self.language = QLineEdit()
        self.language.setReadOnly(True)
        self.timezone = QLineEdit()
        self.low_stock_alerts = QCheckBox("Mostrar alertas de stock bajo")
        self.default_low_stock_threshold = QSpinBox()
        self.default_low_stock_threshold.setRange(0, 10_000)
        self.promo_link = QLineEdit()
        fp.addRow("Moneda", self.currency)
        fp.addRow("Idioma", self.language)
        fp.addRow("Zona horaria", self.timezone)
        fp.addRow("", self.low_stock_alerts)
        fp.addRow("Umbral de stock bajo", self.default_low_stock_threshold)
        fp.addRow("Enlace de promociones", self.promo_link)
        root.addWidget(box_prefs)

        box_look = QGroupBox("Apariencia")
        fl = QVBoxLayout(box_look)
        self.chk_christmas = QCheckBox("Modo navideño")
        fl.addWidget(self.chk_christmas)
        root.addWidget(box_look)

        row = QHBoxLayout()
        row.addStretch(1)
        self.btn_reset = QPushButton("Restablecer")
        self.btn_save = QPushButton("Guardar cambios")
        row.addWidget(self.btn_reset)
        row.addWidget(self.btn_save)
        root.addLayout(row)
        root.addStretch(1)

    _TEXT_KEYS = ("company_name", "company_email", "company_phone", "company_address",
                  "currency", "language", "timezone", "promo_link")

    def set_values(self, values: dict) -> None:
        for key in self._TEXT_KEYS:
            getattr(self, key).setText(str(values.get(key) or ""))
        self.low_stock_alerts.setChecked(bool(values.get("low_stock_alerts")))
        self.default_low_stock_threshold.setValue(int(values.get("default_low_stock_threshold") or 0))

    def values(self) -> dict:
        out = {key: getattr(self, key).text().strip() for key in self._TEXT_KEYS}
        out["low_stock_alerts"] = self.low_stock_alerts.isChecked()
        out["default_low_stock_threshold"] = self.default_low_stock_threshold.value()
        return out
