"""
Product module package exports.

- ProductController: product CRUD, search, category filter, low-stock panel.
- ProductView / ProductForm / ProductsTableModel: the Qt pieces it wires.
"""

from .controller import ProductController
from .view import ProductView
from .form import ProductForm
from .model import ProductsTableModel

__all__ = [
    "ProductController",
    "ProductView",
    "ProductForm",
    "ProductsTableModel",
]
