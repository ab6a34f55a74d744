from .controller import BirthdaysController
from .view import BirthdaysView

__all__ = ["BirthdaysController", "BirthdaysView"]
