from .controller import SettingsController
from .view import SettingsView

__all__ = ["SettingsController", "SettingsView"]
