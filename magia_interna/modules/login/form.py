from PySide6.QtWidgets import QDialog, QFormLayout, QLabel, QLineEdit, QDialogButtonBox

from ...constants import APP_NAME


class LoginForm(QDialog):
    def __init__(self, parent=None, message: str = ""):
        super().__init__(parent)
        self.setWindowTitle(f"{APP_NAME}: Iniciar sesión")
        lay = QFormLayout(self)
        self.lbl_message = QLabel(message)
        self.lbl_message.setStyleSheet("color:#b00020;")
        self.lbl_message.setVisible(bool(message))
        self.username = QLineEdit()
        self.password = QLineEdit()
        self.password.setEchoMode(QLineEdit.Password)
        lay.addRow(self.lbl_message)
        lay.addRow("Usuario", self.username)
        lay.addRow("Contraseña", self.password)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.button(QDialogButtonBox.Ok).setText("Ingresar")
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        lay.addRow(self.buttons)

    def get_values(self) -> tuple[str, str]:
        return self.username.text().strip(), self.password.text()
