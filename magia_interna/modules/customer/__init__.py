from .controller import CustomerController
from .details import CustomerDetails
from .form import CustomerForm
from .model import CustomersTableModel
from .view import CustomerView

__all__ = [
    "CustomerController",
    "CustomerView",
    "CustomerDetails",
    "CustomerForm",
    "CustomersTableModel",
]
