from .composer import SaleDraft, SaleLine, SaleValidationError
from .controller import SalesController
from .details import SaleDetails
from .form import SaleForm
from .model import SalesTableModel, SaleItemsTableModel
from .view import SalesView

__all__ = [
    "SaleDraft",
    "SaleLine",
    "SaleValidationError",
    "SalesController",
    "SaleDetails",
    "SaleForm",
    "SalesTableModel",
    "SaleItemsTableModel",
    "SalesView",
]
