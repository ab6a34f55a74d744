from __future__ import annotations

from typing import List

from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ...utils.dates import format_birth_date
from ...widgets.kpi_card import Card, KPICard
from .logic import BirthdayEntry, MonthGroup


class BirthdaysView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        self.lbl_title = QLabel("<h2>Cumpleaños</h2>")
        root.addWidget(self.lbl_title)
        root.addWidget(QLabel("Gestiona y celebra los cumpleaños de tus clientes"))

        stats = QHBoxLayout()
        self.card_total = KPICard("Con fecha registrada", "clientes")
        self.card_month = KPICard("Este mes", "cumpleaños")
        self.card_upcoming = KPICard("Próximos 30 días", "cumpleaños")
        for c in (self.card_total, self.card_month, self.card_upcoming):
            stats.addWidget(c)
        root.addLayout(stats)

        lists = QHBoxLayout()
        self.lst_upcoming = QListWidget()
        self.lst_month = QListWidget()
        lists.addWidget(Card(self.lst_upcoming, "Próximos cumpleaños"), 1)
        lists.addWidget(Card(self.lst_month, "Cumpleaños de este mes"), 1)
        root.addLayout(lists)

        self.tree = QTreeWidget()
        self.tree.setHeaderLabels(["Cliente", "Fecha", "Edad", "Faltan"])
        root.addWidget(Card(self.tree, "Cumpleaños por mes"), 1)

    def set_upcoming(self, entries: List[BirthdayEntry]) -> None:
        self.lst_upcoming.clear()
        for e in entries:
            self.lst_upcoming.addItem(f"{e.customer.name}: {e.label} (cumple {e.age + 1})")
        if not entries:
            self.lst_upcoming.addItem("No hay cumpleaños en los próximos 30 días")
        self.card_upcoming.set_value(str(len(entries)))

    def set_current_month(self, entries: List[BirthdayEntry]) -> None:
        self.lst_month.clear()
        for e in entries:
            self.lst_month.addItem(f"{e.born.day:02d}: {e.customer.name}")
        if not entries:
            self.lst_month.addItem("Nadie cumple años este mes")
        self.card_month.set_value(str(len(entries)))

    def set_groups(self, groups: List[MonthGroup]) -> None:
        self.tree.clear()
        for g in groups:
            parent = QTreeWidgetItem([f"{g.name} ({len(g.entries)})"])
            for e in g.entries:
                parent.addChild(
                    QTreeWidgetItem([
                        e.customer.name,
                        format_birth_date(e.born.isoformat()),
                        str(e.age),
                        e.label,
                    ])
                )
            self.tree.addTopLevelItem(parent)
        self.tree.expandAll()
        for col in range(4):
            self.tree.resizeColumnToContents(col)
