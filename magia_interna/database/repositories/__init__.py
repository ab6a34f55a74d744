# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from magia_interna.database.repositories import (
        ProductsRepo, Product,
        CustomersRepo, Customer,
        SalesRepo, SaleHeader, SaleItem,
        ExpensesRepo, Expense,
        AnalyticsRepo, SettingsRepo,
        DomainError, InsufficientStockError,
    )
"""

from .errors import DomainError, InsufficientStockError, NotFoundError

# ---------------- Products -----------------
from .products_repo import ProductsRepo, Product

# ---------------- Customers ----------------
from .customers_repo import CustomersRepo, Customer

# ------------------ Sales ------------------
from .sales_repo import SalesRepo, SaleHeader, SaleItem

# ---------------- Expenses -----------------
from .expenses_repo import ExpensesRepo, Expense

# ------------- Analytics / settings -------------
from .analytics_repo import AnalyticsRepo
from .settings_repo import SettingsRepo

__all__ = [
    "DomainError",
    "InsufficientStockError",
    "NotFoundError",
    "ProductsRepo",
    "Product",
    "CustomersRepo",
    "Customer",
    "SalesRepo",
    "SaleHeader",
    "SaleItem",
    "ExpensesRepo",
    "Expense",
    "AnalyticsRepo",
    "SettingsRepo",
]
