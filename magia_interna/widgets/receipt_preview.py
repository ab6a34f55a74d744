from __future__ import annotations

import logging

from PySide6.QtGui import QKeySequence, QShortcut, QTextDocument
from PySide6.QtPrintSupport import QPrintDialog, QPrinter
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from ..utils.templating import render

_log = logging.getLogger(__name__)


class HtmlPreviewDialog(QDialog):
    """
    Renders a jinja2 template into a QTextBrowser with a Print button.
    Used for sale receipts and promotional e-mail previews.
    """

    def __init__(self, template_name: str, context: dict, title: str = "Vista previa", parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.resize(620, 680)

        self.html = render(template_name, context)

        lay = QVBoxLayout(self)
        self.browser = QTextBrowser()
        self.browser.setOpenExternalLinks(True)
        self.browser.setHtml(self.html)
        lay.addWidget(self.browser, 1)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Close)
        self.btn_print = self.buttons.addButton("Imprimir", QDialogButtonBox.ActionRole)
        self.btn_print.clicked.connect(self.print_document)
        self.buttons.rejected.connect(self.reject)
        lay.addWidget(self.buttons)

        QShortcut(QKeySequence("Ctrl+P"), self).activated.connect(self.print_document)

    def print_document(self) -> None:
        printer = QPrinter(QPrinter.HighResolution)
        printer.setDocName(self.windowTitle())
        dlg = QPrintDialog(printer, self)
        if dlg.exec() != QDialog.Accepted:
            return
        doc = QTextDocument()
        doc.setHtml(self.html)
        doc.print_(printer)
        _log.info("Printed %s", self.windowTitle())
