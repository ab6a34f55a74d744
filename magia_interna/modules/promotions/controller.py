from __future__ import annotations

import logging
import sqlite3

from PySide6.QtCore import QMimeData, QUrl
from PySide6.QtGui import QDesktopServices, QGuiApplication
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from . import logic
from .view import PromotionsView
from ...constants import DEFAULT_PROMO_LINK
from ...database.repositories.customers_repo import CustomersRepo
from ...database.repositories.settings_repo import SettingsRepo
from ...utils import ui_helpers as ui
from ...utils.templating import render

_log = logging.getLogger(__name__)

PROMO_TEMPLATE = "promo_email.html"


class PromotionsController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.customers = CustomersRepo(conn)
        self.settings = SettingsRepo(conn)
        self.view = PromotionsView()

        self.view.edt_link.setText(self.settings.get("promo_link") or DEFAULT_PROMO_LINK)

        self.view.cmb_template.currentIndexChanged.connect(lambda _=None: self._apply_template())
        self.view.cmb_filter.currentIndexChanged.connect(lambda _=None: self._reload_customers())
        self.view.chk_all.toggled.connect(self._on_select_all)
        self.view.lst_customers.itemChanged.connect(lambda _=None: self._update_count())
        self.view.edt_manual.textChanged.connect(self._update_count)
        for w in (self.view.edt_subject, self.view.edt_link):
            w.textChanged.connect(lambda _=None: self._update_preview())
        self.view.edt_body.textChanged.connect(self._update_preview)

        self.view.btn_copy_emails.clicked.connect(self._copy_emails)
        self.view.btn_copy_html.clicked.connect(self._copy_html)
        self.view.btn_open_mail.clicked.connect(self._open_mail)

        self.view.cmb_template.setCurrentIndex(1)
        self._reload_customers()
        self._update_preview()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload_customers()

    # ------------------------------------------------------------------

    def _apply_template(self) -> None:
        t = logic.template_by_id(self.view.cmb_template.currentData() or "")
        if t is None:
            return
        self.view.edt_subject.setText(t.subject)
        self.view.edt_body.setPlainText(t.body)

    def _reload_customers(self) -> None:
        rows = logic.filter_customers(self.customers.with_email(), self.view.cmb_filter.currentData())
        self.view.set_customers(rows)
        self._update_count()

    def _on_select_all(self, on: bool) -> None:
        self.view.set_all_checked(on)
        self._update_count()

    def recipients(self) -> list[str]:
        return logic.merge_recipients(self.view.checked_emails(), self.view.edt_manual.toPlainText())

    def _update_count(self) -> None:
        self.view.lbl_recipients.setText(f"{len(self.recipients())} destinatario(s)")

    def _html(self) -> str:
        return render(
            PROMO_TEMPLATE,
            {
                "subject": self.view.edt_subject.text(),
                "recipients": self.recipients(),
                "body": self.view.edt_body.toPlainText(),
                "promo_link": self.view.edt_link.text().strip(),
                "company_name": self.settings.get("company_name") or "",
            },
        )

    def _update_preview(self) -> None:
        self.view.preview.setHtml(self._html())

    # ------------------------------------------------------------------

    def _copy_emails(self) -> None:
        emails = self.recipients()
        if not emails:
            ui.error(self.view, "Sin destinatarios", "No hay destinatarios seleccionados.")
            return
        QGuiApplication.clipboard().setText(", ".join(emails))
        ui.info(self.view, "Copiado", f"{len(emails)} correos copiados al portapapeles.")

    def _copy_html(self) -> None:
        mime = QMimeData()
        mime.setHtml(self._html())
        mime.setText(logic.full_body(self.view.edt_body.toPlainText(), self.view.edt_link.text().strip()))
        QGuiApplication.clipboard().setMimeData(mime)
        ui.info(self.view, "Copiado", "Diseño copiado. ¡Listo para pegar en Gmail/Outlook!")

    def _open_mail(self) -> None:
        emails = self.recipients()
        if not emails:
            ui.error(self.view, "Sin destinatarios", "No hay destinatarios seleccionados.")
            return
        link, too_long = logic.build_mailto(
            emails,
            self.view.edt_subject.text(),
            self.view.edt_body.toPlainText(),
            self.view.edt_link.text().strip(),
        )
        if too_long:
            _log.warning("mailto link is %d characters long", len(link))
            ui.info(
                self.view,
                "Lista muy larga",
                'La lista es muy larga para abrir directamente. Mejor usa "Copiar correos".',
            )
        QDesktopServices.openUrl(QUrl(link))
