from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from ...widgets.kpi_card import Card
from .logic import EMAIL_TEMPLATES, FILTERS


class PromotionsView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.addWidget(QLabel("<h2>Promociones</h2>"))
        root.addWidget(QLabel("Envía correos masivos y gestiona campañas promocionales."))

        split = QSplitter(Qt.Horizontal)

        # ---- Left: message ----
        left = QWidget()
        ll = QVBoxLayout(left)
        form = QFormLayout()
        self.cmb_template = QComboBox()
        self.cmb_template.addItem("(Escribir desde cero)", None)
        for t in EMAIL_TEMPLATES:
            self.cmb_template.addItem(t.name, t.id)
        self.edt_subject = QLineEdit()
        self.edt_body = QPlainTextEdit()
        self.edt_link = QLineEdit()
        form.addRow("Plantilla", self.cmb_template)
        form.addRow("Asunto", self.edt_subject)
        form.addRow("Mensaje", self.edt_body)
        form.addRow("Enlace", self.edt_link)
        ll.addLayout(form)
        self.preview = QTextBrowser()
        self.preview.setOpenExternalLinks(True)
        ll.addWidget(Card(self.preview, "Vista previa"), 1)
        split.addWidget(left)

        # ---- Right: audience ----
        right = QWidget()
        rl = QVBoxLayout(right)
        self.cmb_filter = QComboBox()
        for key, label in FILTERS:
            self.cmb_filter.addItem(label, key)
        rl.addWidget(self.cmb_filter)
        self.chk_all = QCheckBox("Seleccionar todos los listados")
        rl.addWidget(self.chk_all)
        self.lst_customers = QListWidget()
        rl.addWidget(self.lst_customers, 1)
        rl.addWidget(QLabel("Correos adicionales (separados por coma, punto y coma o línea):"))
        self.edt_manual = QPlainTextEdit()
        self.edt_manual.setFixedHeight(80)
        rl.addWidget(self.edt_manual)
        self.lbl_recipients = QLabel("0 destinatarios")
        rl.addWidget(self.lbl_recipients)

        buttons = QHBoxLayout()
        self.btn_copy_emails = QPushButton("Copiar correos")
        self.btn_copy_html = QPushButton("Copiar diseño")
        self.btn_open_mail = QPushButton("Abrir cliente de correo")
        buttons.addWidget(self.btn_copy_emails)
        buttons.addWidget(self.btn_copy_html)
        buttons.addWidget(self.btn_open_mail)
        rl.addLayout(buttons)
        split.addWidget(right)

        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split, 1)

    # ---------------- customer list ----------------
    def set_customers(self, customers) -> None:
        self.lst_customers.blockSignals(True)
        self.lst_customers.clear()
        for c in customers:
            it = QListWidgetItem(f"{c.name} <{c.email}>")
            it.setData(Qt.UserRole, c.email)
            it.setFlags(it.flags() | Qt.ItemIsUserCheckable)
            it.setCheckState(Qt.Unchecked)
            self.lst_customers.addItem(it)
        self.lst_customers.blockSignals(False)
        self.chk_all.blockSignals(True)
        self.chk_all.setChecked(False)
        self.chk_all.setText(f"Seleccionar todos los listados ({len(customers)})")
        self.chk_all.blockSignals(False)

    def set_all_checked(self, on: bool) -> None:
        self.lst_customers.blockSignals(True)
        state = Qt.Checked if on else Qt.Unchecked
        for i in range(self.lst_customers.count()):
            self.lst_customers.item(i).setCheckState(state)
        self.lst_customers.blockSignals(False)

    def checked_emails(self) -> list[str]:
        out = []
        for i in range(self.lst_customers.count()):
            it = self.lst_customers.item(i)
            if it.checkState() == Qt.Checked:
                out.append(it.data(Qt.UserRole))
        return out
