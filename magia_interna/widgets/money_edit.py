from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLineEdit

from ..utils.helpers import fmt_cop, format_input_for_display, parse_cop


class MoneyEdit(QLineEdit):
    """
    Peso amount input. Shows '$129.000' while typing; value() returns the
    number (0 when empty). Negative amounts cannot be typed.
    """

    valueChanged = Signal(float)

    def __init__(self, parent=None, value: float = 0.0):
        super().__init__(parent)
        self.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        self.setPlaceholderText("$0")
        self.textEdited.connect(self._reformat)
        self.setValue(value)

    def _reformat(self, text: str) -> None:
        shown = format_input_for_display(text)
        if shown != text:
            self.setText(shown)
            self.setCursorPosition(len(shown))
        self.valueChanged.emit(self.value())

    def value(self) -> float:
        return parse_cop(self.text())

    def setValue(self, v: float) -> None:
        v = float(v or 0)
        self.setText(fmt_cop(v) if v > 0 else "")
        self.valueChanged.emit(self.value())
