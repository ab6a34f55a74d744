from .controller import LoginController, INVALID_CREDENTIALS
from .form import LoginForm

__all__ = ["LoginController", "LoginForm", "INVALID_CREDENTIALS"]
