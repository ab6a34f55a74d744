"""Template context for the printable sale receipt (templates/sale_receipt.html)."""
from __future__ import annotations

from dataclasses import asdict
import sqlite3

from ...database.repositories.customers_repo import CustomersRepo
from ...database.repositories.errors import NotFoundError
from ...database.repositories.sales_repo import SalesRepo
from ...database.repositories.settings_repo import SettingsRepo
from .model import PAYMENT_LABELS

RECEIPT_TEMPLATE = "sale_receipt.html"


def receipt_context(conn: sqlite3.Connection, sale_id: int) -> dict:
    sales = SalesRepo(conn)
    header = sales.get_header(sale_id)
    if header is None:
        raise NotFoundError(f"Venta #{sale_id} no encontrada.")
    items = [dict(r) for r in sales.list_items(sale_id)]
    customer = CustomersRepo(conn).get(header.customer_id) if header.customer_id else None
    settings = SettingsRepo(conn).get_all()
    return {
        "company": settings,
        "sale": asdict(header),
        "customer_name": customer.name if customer else "Cliente Anónimo",
        "payment_label": PAYMENT_LABELS.get(header.payment_method, header.payment_method),
        "items": items,
        "subtotal": sum(float(it["total_price"]) for it in items),
    }
