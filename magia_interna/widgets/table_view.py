from PySide6.QtCore import Qt
from PySide6.QtWidgets import QTableView

class TableView(QTableView):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSortingEnabled(False)
        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QTableView.SelectRows)
        self.setSelectionMode(QTableView.SingleSelection)
        self.setEditTriggers(QTableView.NoEditTriggers)
        self.horizontalHeader().setStretchLastSection(True)
        self.verticalHeader().setVisible(False)

    def selected_row(self) -> int | None:
        sm = self.selectionModel()
        if sm is None:
            return None
        rows = sm.selectedRows()
        return rows[0].row() if rows else None

    def selected_id(self, column: int = 0):
        """Value of `column` (default the id column) in the selected row, via Qt.UserRole."""
        row = self.selected_row()
        if row is None or self.model() is None:
            return None
        return self.model().index(row, column).data(Qt.UserRole)
