from __future__ import annotations

import sqlite3
from datetime import date

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from . import logic
from .view import BirthdaysView
from ...database.repositories.customers_repo import CustomersRepo


class BirthdaysController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = CustomersRepo(conn)
        self.view = BirthdaysView()
        self.refresh()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        today = date.today()
        customers = self.repo.with_birth_date()
        self.view.card_total.set_value(str(len(customers)))
        self.view.set_upcoming(logic.upcoming(customers, today))
        self.view.set_current_month(logic.current_month(customers, today))
        self.view.set_groups(logic.by_month(customers, today))
