from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget


class KPICard(QFrame):
    clicked = Signal()

    def __init__(self, title: str, caption: str = "") -> None:
        super().__init__()
        self.setObjectName("kpi_card")
        self.setCursor(Qt.PointingHandCursor)

        v = QVBoxLayout(self)
        v.setContentsMargins(12, 10, 12, 12)
        v.setSpacing(2)

        self.lbl_title = QLabel(title)
        self.lbl_title.setObjectName("kpi_title")
        f = self.lbl_title.font()
        f.setBold(True)
        self.lbl_title.setFont(f)

        self.lbl_value = QLabel("-")
        self.lbl_value.setObjectName("kpi_value")
        fv = QFont(self.lbl_value.font())
        fv.setPointSize(fv.pointSize() + 6)
        fv.setBold(True)
        self.lbl_value.setFont(fv)

        self.lbl_caption = QLabel(caption)
        self.lbl_caption.setObjectName("kpi_caption")

        v.addWidget(self.lbl_title)
        v.addWidget(self.lbl_value)
        v.addWidget(self.lbl_caption)

    def mousePressEvent(self, e) -> None:  # type: ignore[override]
        if e.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(e)

    def value(self) -> str:
        return self.lbl_value.text()

    def set_value(self, s: str) -> None:
        self.lbl_value.setText(s)

    def set_caption(self, s: str) -> None:
        self.lbl_caption.setText(s)


class Card(QWidget):
    """Wrap any widget in a titled card frame."""

    def __init__(self, inner: QWidget, title: str) -> None:
        super().__init__()
        v = QVBoxLayout(self)
        v.setContentsMargins(0, 0, 0, 0)
        frame = QFrame()
        frame.setObjectName("card")
        frame.setFrameShape(QFrame.StyledPanel)
        fl = QVBoxLayout(frame)
        fl.setContentsMargins(12, 10, 12, 12)
        fl.setSpacing(6)
        fl.addWidget(QLabel(f"<b>{title}</b>"))
        fl.addWidget(inner)
        v.addWidget(frame)
