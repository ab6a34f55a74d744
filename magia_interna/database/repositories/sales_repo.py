from __future__ import annotations
from dataclasses import dataclass, field
import logging
import sqlite3
from typing import Iterable, List, Optional

from ...utils.helpers import today_str
from .customers_repo import CustomersRepo
from .errors import DomainError, InsufficientStockError, NotFoundError, immediate_tx

_log = logging.getLogger(__name__)

# Totals are compared at peso-cent precision.
_TOTAL_TOLERANCE = 0.005


@dataclass
class SaleHeader:
    sale_id: int | None
    customer_id: int | None
    payment_method: str
    discount_amount: float
    tax_amount: float
    delivery_fee: float
    total_amount: float
    status: str = "completed"
    notes: str | None = None
    sale_date: str = field(default_factory=today_str)


@dataclass
class SaleItem:
    item_id: int | None
    sale_id: int | None
    product_id: int
    quantity: int
    unit_price: float
    total_price: float
    unit_cost: float | None = None


def expected_total(header: SaleHeader, items: Iterable[SaleItem]) -> float:
    """Σ line totals + tax + delivery − discount."""
    lines = sum(float(it.total_price) for it in items)
    return lines + float(header.tax_amount) + float(header.delivery_fee) - float(header.discount_amount)


class SalesRepo:
    """
    Sales repository.

    Stock is authoritative here: every sale line decrements
    products.stock_quantity with a conditional UPDATE inside the same
    IMMEDIATE transaction as the sale header and items. If any line
    cannot be covered the whole sale is rolled back with
    InsufficientStockError. Cancelling, editing and deleting a sale give
    the previously taken units back first.
    """

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def list_sales(self, search: str = "") -> list[sqlite3.Row]:
        """
        Sales newest first. `search` matches the customer name or the
        payment method (case-insensitive).
        """
        sql = """
        SELECT s.sale_id, s.sale_date, s.customer_id,
               COALESCE(c.name, 'Cliente Anónimo') AS customer_name,
               s.payment_method, s.status,
               CAST(s.discount_amount AS REAL) AS discount_amount,
               CAST(s.tax_amount AS REAL)      AS tax_amount,
               CAST(s.delivery_fee AS REAL)    AS delivery_fee,
               CAST(s.total_amount AS REAL)    AS total_amount,
               s.notes
        FROM sales s
        LEFT JOIN customers c ON c.customer_id = s.customer_id
        """
        params: list = []
        if search:
            like = f"%{search.strip().lower()}%"
            sql += " WHERE LOWER(COALESCE(c.name,'')) LIKE ? OR LOWER(s.payment_method) LIKE ?"
            params += [like, like]
        sql += " ORDER BY DATE(s.sale_date) DESC, s.sale_id DESC"
        return self.conn.execute(sql, params).fetchall()

    def get_header(self, sid: int) -> SaleHeader | None:
        r = self.conn.execute(
            """
            SELECT sale_id, customer_id, payment_method,
                   CAST(discount_amount AS REAL) AS discount_amount,
                   CAST(tax_amount AS REAL)      AS tax_amount,
                   CAST(delivery_fee AS REAL)    AS delivery_fee,
                   CAST(total_amount AS REAL)    AS total_amount,
                   status, notes, sale_date
            FROM sales WHERE sale_id=?
            """,
            (sid,),
        ).fetchone()
        return SaleHeader(**dict(r)) if r else None

    def list_items(self, sid: int) -> list[sqlite3.Row]:
        sql = """
        SELECT si.item_id, si.sale_id, si.product_id, p.name AS product_name, p.sku,
               p.category, si.quantity,
               CAST(si.unit_price AS REAL)  AS unit_price,
               CAST(si.total_price AS REAL) AS total_price,
               CAST(COALESCE(si.unit_cost, p.cost) AS REAL) AS unit_cost
        FROM sale_items si
        JOIN products p ON p.product_id = si.product_id
        WHERE si.sale_id = ?
        ORDER BY si.item_id
        """
        return self.conn.execute(sql, (sid,)).fetchall()

    # ---------------------------------------------------------------------
    # INTERNAL WRITES
    # ---------------------------------------------------------------------
    def _check(self, header: SaleHeader, items: List[SaleItem]) -> None:
        if not items:
            raise DomainError("Debe agregar al menos un producto a la venta.")
        for it in items:
            if it.product_id is None:
                raise DomainError("Todos los productos deben estar seleccionados.")
            if int(it.quantity) < 1:
                raise DomainError("La cantidad debe ser al menos 1.")
            if abs(float(it.total_price) - int(it.quantity) * float(it.unit_price)) > _TOTAL_TOLERANCE:
                raise DomainError("El total de la línea no coincide con cantidad × precio.")
        for amount in (header.discount_amount, header.tax_amount, header.delivery_fee):
            if float(amount) < 0:
                raise DomainError("Descuento, impuesto y domicilio no pueden ser negativos.")
        if abs(float(header.total_amount) - expected_total(header, items)) > _TOTAL_TOLERANCE:
            raise DomainError("El total de la venta no coincide con sus líneas.")

    def _take_stock(self, product_id: int, qty: int) -> None:
        cur = self.conn.execute(
            "UPDATE products SET stock_quantity = stock_quantity - ? "
            "WHERE product_id = ? AND stock_quantity >= ?",
            (qty, product_id, qty),
        )
        if cur.rowcount == 0:
            r = self.conn.execute(
                "SELECT stock_quantity FROM products WHERE product_id=?", (product_id,)
            ).fetchone()
            raise InsufficientStockError(product_id, qty, None if r is None else int(r[0]))

    def _give_back_stock(self, sid: int) -> None:
        for r in self.conn.execute(
            "SELECT product_id, quantity FROM sale_items WHERE sale_id=?", (sid,)
        ).fetchall():
            self.conn.execute(
                "UPDATE products SET stock_quantity = stock_quantity + ? WHERE product_id=?",
                (int(r["quantity"]), r["product_id"]),
            )

    def _insert_items(self, sid: int, items: Iterable[SaleItem]) -> None:
        for it in items:
            self._take_stock(it.product_id, int(it.quantity))
            it.sale_id = sid
            cur = self.conn.execute(
                """
                INSERT INTO sale_items (sale_id, product_id, quantity, unit_price, total_price, unit_cost)
                VALUES (?, ?, ?, ?, ?,
                        COALESCE(?, (SELECT cost FROM products WHERE product_id = ?)))
                """,
                (sid, it.product_id, int(it.quantity), float(it.unit_price),
                 float(it.total_price), it.unit_cost, it.product_id),
            )
            it.item_id = int(cur.lastrowid)

    def _resolve_customer(self, header: SaleHeader) -> int:
        # runs inside immediate_tx; rolled back together with a failed sale
        if header.customer_id is None:
            return CustomersRepo(self.conn).anonymous_id()
        return int(header.customer_id)

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def create_sale(self, header: SaleHeader, items: Iterable[SaleItem]) -> int:
        """
        Insert header + items and take stock, all or nothing.
        A missing customer falls back to the anonymous customer.
        """
        items = list(items)
        self._check(header, items)
        with immediate_tx(self.conn):
            cid = self._resolve_customer(header)
            cur = self.conn.execute(
                """
                INSERT INTO sales (customer_id, payment_method, discount_amount, tax_amount,
                                   delivery_fee, total_amount, status, notes, sale_date)
                VALUES (?,?,?,?,?,?,?,?,?)
                """,
                (
                    cid, header.payment_method, float(header.discount_amount),
                    float(header.tax_amount), float(header.delivery_fee),
                    float(header.total_amount), header.status, header.notes, header.sale_date,
                ),
            )
            sid = int(cur.lastrowid)
            self._insert_items(sid, items)
        header.sale_id = sid
        header.customer_id = cid
        _log.info("Sale #%s created (%d lines, total %.2f)", sid, len(items), float(header.total_amount))
        return sid

    def update_sale(self, header: SaleHeader, items: Iterable[SaleItem]) -> None:
        """
        Replace a completed sale's header and lines. Old lines give their
        units back before the new lines take theirs.
        """
        items = list(items)
        self._check(header, items)
        with immediate_tx(self.conn):
            cid = self._resolve_customer(header)
            row = self.conn.execute(
                "SELECT status FROM sales WHERE sale_id=?", (header.sale_id,)
            ).fetchone()
            if row is None:
                raise NotFoundError(f"Venta #{header.sale_id} no encontrada.")
            if row["status"] != "completed":
                raise DomainError("Solo se pueden editar ventas completadas.")

            self._give_back_stock(header.sale_id)
            self.conn.execute("DELETE FROM sale_items WHERE sale_id=?", (header.sale_id,))
            self.conn.execute(
                """
                UPDATE sales
                   SET customer_id=?, payment_method=?, discount_amount=?, tax_amount=?,
                       delivery_fee=?, total_amount=?, notes=?, sale_date=?
                 WHERE sale_id=?
                """,
                (
                    cid, header.payment_method, float(header.discount_amount),
                    float(header.tax_amount), float(header.delivery_fee),
                    float(header.total_amount), header.notes, header.sale_date, header.sale_id,
                ),
            )
            self._insert_items(header.sale_id, items)
        header.customer_id = cid
        _log.info("Sale #%s updated", header.sale_id)

    def cancel_sale(self, sid: int) -> None:
        with immediate_tx(self.conn):
            row = self.conn.execute("SELECT status FROM sales WHERE sale_id=?", (sid,)).fetchone()
            if row is None:
                raise NotFoundError(f"Venta #{sid} no encontrada.")
            if row["status"] == "cancelled":
                return
            self._give_back_stock(sid)
            self.conn.execute("UPDATE sales SET status='cancelled' WHERE sale_id=?", (sid,))
        _log.info("Sale #%s cancelled", sid)

    def delete_sale(self, sid: int) -> None:
        with immediate_tx(self.conn):
            row = self.conn.execute("SELECT status FROM sales WHERE sale_id=?", (sid,)).fetchone()
            if row is None:
                raise NotFoundError(f"Venta #{sid} no encontrada.")
            if row["status"] == "completed":
                self._give_back_stock(sid)
            self.conn.execute("DELETE FROM sale_items WHERE sale_id=?", (sid,))
            self.conn.execute("DELETE FROM sales WHERE sale_id=?", (sid,))
        _log.info("Sale #%s deleted", sid)


__all__ = [
    "SaleHeader",
    "SaleItem",
    "SalesRepo",
    "expected_total",
    "DomainError",
    "InsufficientStockError",
]
