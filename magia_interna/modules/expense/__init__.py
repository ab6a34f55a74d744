from .controller import ExpenseController
from .form import ExpenseForm
from .model import ExpensesTableModel
from .view import ExpenseView

__all__ = ["ExpenseController", "ExpenseForm", "ExpensesTableModel", "ExpenseView"]
