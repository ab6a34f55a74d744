# magia_interna/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Every test gets a fresh in-memory SQLite DB with the real schema
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON
# - `ids` seeds a small catalog + customers and returns their ids
# - `make_sale` builds and stores a sale through SalesRepo
# - Silence benign Qt signal warnings
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import re
import sqlite3
from typing import Optional

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6 import QtCore

from magia_interna.database import prepare_connection
from magia_interna.database.repositories.customers_repo import CustomersRepo
from magia_interna.database.repositories.products_repo import ProductsRepo
from magia_interna.database.repositories.sales_repo import SaleHeader, SaleItem, SalesRepo


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):
    return qapp


# ---------- Silence benign Qt warnings ----------
_BENIGN_QT_PATTERNS = [
    r"^QObject::connect: .* already connected",
    r"^QObject::disconnect: Unexpected null parameter",
    r"^QBasicTimer::stop: Failed\. Platform timer not running\.",
]

@pytest.fixture(autouse=True, scope="session")
def _silence_benign_qt():
    """Filter common harmless Qt messages during tests."""
    original = QtCore.qInstallMessageHandler(None)
    rx = [re.compile(p) for p in _BENIGN_QT_PATTERNS]

    def handler(msg_type, context, message):
        text = str(message)
        for r in rx:
            if r.search(text):
                return
        QtCore.qInstallMessageHandler(None)
        try:
            QtCore.qDebug(message)
        finally:
            QtCore.qInstallMessageHandler(handler)

    QtCore.qInstallMessageHandler(handler)
    try:
        yield
    finally:
        QtCore.qInstallMessageHandler(original)


# ---------- Per-test database ----------
@pytest.fixture()
def conn():
    """Fresh in-memory database with schema, version stamp and default settings."""
    con = sqlite3.connect(":memory:")
    prepare_connection(con)
    try:
        yield con
    finally:
        con.close()


# ---------- Seed data ----------
PRODUCTS = [
    dict(name="Blusa Lino", sku="BL-01", category="Blusas", price=50000, cost=20000,
         stock_quantity=10, min_stock=5),
    dict(name="Jean Skinny", sku="JN-01", category="Pantalones", price=120000, cost=60000,
         stock_quantity=3, min_stock=5),
    dict(name="Vestido Floral", sku="VS-01", category="Vestidos", price=90000, cost=40000,
         stock_quantity=8, min_stock=2),
]

CUSTOMERS = [
    dict(name="Ana Gómez", email="ana@example.com", birth_date="1990-05-14", customer_type="vip"),
    dict(name="Luis Pérez", email="luis@example.com", customer_type="regular"),
]


@pytest.fixture()
def ids(conn: sqlite3.Connection) -> dict:
    """Seed products and customers; return their ids by short key."""
    products = ProductsRepo(conn)
    customers = CustomersRepo(conn)
    return {
        "blusa": products.create(PRODUCTS[0]),
        "jean": products.create(PRODUCTS[1]),
        "vestido": products.create(PRODUCTS[2]),
        "ana": customers.create(CUSTOMERS[0]),
        "luis": customers.create(CUSTOMERS[1]),
    }


@pytest.fixture()
def make_sale(conn: sqlite3.Connection):
    """
    make_sale([(product_id, qty, unit_price), ...], customer_id=None, ...) -> sale_id

    The header total is computed from the lines so SalesRepo accepts it.
    """
    repo = SalesRepo(conn)

    def _make(
        lines,
        customer_id: Optional[int] = None,
        *,
        payment_method: str = "efectivo",
        discount: float = 0,
        tax: float = 0,
        delivery: float = 0,
        sale_date: str = "2025-03-10",
    ) -> int:
        items = [
            SaleItem(item_id=None, sale_id=None, product_id=pid, quantity=qty,
                     unit_price=price, total_price=qty * price)
            for pid, qty, price in lines
        ]
        total = sum(it.total_price for it in items) + tax + delivery - discount
        header = SaleHeader(
            sale_id=None,
            customer_id=customer_id,
            payment_method=payment_method,
            discount_amount=discount,
            tax_amount=tax,
            delivery_fee=delivery,
            total_amount=total,
            sale_date=sale_date,
        )
        return repo.create_sale(header, items)

    return _make


def stock_of(conn: sqlite3.Connection, product_id: int) -> int:
    return int(conn.execute(
        "SELECT stock_quantity FROM products WHERE product_id=?", (product_id,)
    ).fetchone()[0])


@pytest.fixture()
def stock(conn):
    return lambda pid: stock_of(conn, pid)
