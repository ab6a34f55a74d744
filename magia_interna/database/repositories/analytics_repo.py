# magia_interna/database/repositories/analytics_repo.py
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple


def _to_float(x: Optional[Any]) -> float:
    try:
        return float(x or 0.0)
    except (TypeError, ValueError):
        return 0.0


class AnalyticsRepo:
    """
    Read-only query layer for the Dashboard and Analytics screens.

    Only `completed` sales count. Date columns hold ISO 'YYYY-MM-DD' text
    and are compared directly; callers pass inclusive date_from/date_to.

    Revenue figures here are net of delivery fees
    (total_amount - delivery_fee); delivery is reported on its own.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ----------------------------- Sales -----------------------------

    def sales_with_items(self, date_from: str, date_to: str) -> List[Dict[str, Any]]:
        """
        Completed sales in range, each with its lines nested under "items".
        Line cost is the unit_cost snapshot, else the product's current cost.
        """
        headers = self._rows(
            """
            SELECT sale_id, sale_date, payment_method,
                   CAST(total_amount AS REAL)    AS total_amount,
                   CAST(delivery_fee AS REAL)    AS delivery_fee,
                   CAST(discount_amount AS REAL) AS discount_amount,
                   CAST(tax_amount AS REAL)      AS tax_amount
            FROM sales
            WHERE status = 'completed' AND sale_date >= ? AND sale_date <= ?
            ORDER BY sale_date, sale_id
            """,
            (date_from, date_to),
        )
        sales: Dict[int, Dict[str, Any]] = {}
        for h in headers:
            d = dict(h)
            d["items"] = []
            sales[int(h["sale_id"])] = d

        if sales:
            lines = self._rows(
                """
                SELECT si.sale_id, si.product_id, p.category, si.quantity,
                       CAST(si.unit_price AS REAL)  AS unit_price,
                       CAST(si.total_price AS REAL) AS total_price,
                       CAST(COALESCE(si.unit_cost, p.cost, 0) AS REAL) AS unit_cost
                FROM sale_items si
                JOIN sales s    ON s.sale_id = si.sale_id
                JOIN products p ON p.product_id = si.product_id
                WHERE s.status = 'completed' AND s.sale_date >= ? AND s.sale_date <= ?
                ORDER BY si.sale_id, si.item_id
                """,
                (date_from, date_to),
            )
            for ln in lines:
                d = dict(ln)
                sales[int(d.pop("sale_id"))]["items"].append(d)
        return list(sales.values())

    def net_sales(self, date_from: str, date_to: str) -> float:
        sql = """
            SELECT COALESCE(SUM(CAST(total_amount AS REAL) - CAST(delivery_fee AS REAL)), 0.0) AS v
            FROM sales
            WHERE status = 'completed' AND sale_date >= ? AND sale_date <= ?
        """
        return _to_float(self._scalar(sql, (date_from, date_to)))

    def delivery_fees(self, date_from: str, date_to: str) -> float:
        sql = """
            SELECT COALESCE(SUM(CAST(delivery_fee AS REAL)), 0.0) AS v
            FROM sales
            WHERE status = 'completed' AND sale_date >= ? AND sale_date <= ?
        """
        return _to_float(self._scalar(sql, (date_from, date_to)))

    def sale_count(self, date_from: str, date_to: str) -> int:
        sql = """
            SELECT COUNT(*) AS v FROM sales
            WHERE status = 'completed' AND sale_date >= ? AND sale_date <= ?
        """
        return int(self._scalar(sql, (date_from, date_to)) or 0)

    def top_products(self, date_from: str, date_to: str, limit_n: int = 5) -> List[Dict[str, Any]]:
        """Best sellers by units within the range, with their current stock."""
        rows = self._rows(
            """
            SELECT p.product_id, p.name AS product_name, p.stock_quantity,
                   COALESCE(SUM(si.quantity), 0) AS units,
                   COALESCE(SUM(CAST(si.total_price AS REAL)), 0.0) AS revenue
            FROM sale_items si
            JOIN sales s    ON s.sale_id = si.sale_id AND s.status = 'completed'
            JOIN products p ON p.product_id = si.product_id
            WHERE s.sale_date >= ? AND s.sale_date <= ?
            GROUP BY p.product_id
            ORDER BY units DESC, revenue DESC, p.name COLLATE NOCASE
            LIMIT ?
            """,
            (date_from, date_to, int(limit_n)),
        )
        return [
            {
                "product_id": r["product_id"],
                "product_name": r["product_name"],
                "units": int(r["units"]),
                "revenue": _to_float(r["revenue"]),
                "stock_quantity": int(r["stock_quantity"]),
            }
            for r in rows
        ]

    def sale_years(self) -> List[int]:
        rows = self._rows(
            "SELECT DISTINCT CAST(STRFTIME('%Y', sale_date) AS INTEGER) AS y "
            "FROM sales WHERE sale_date IS NOT NULL ORDER BY y DESC"
        )
        return [int(r["y"]) for r in rows if r["y"] is not None]

    # ----------------------------- Catalog -----------------------------

    def products_by_category(self) -> List[Dict[str, Any]]:
        rows = self._rows(
            "SELECT category, COUNT(*) AS n FROM products "
            "GROUP BY category ORDER BY n DESC, category"
        )
        return [{"category": r["category"], "count": int(r["n"])} for r in rows]

    def product_count(self) -> int:
        return int(self._scalar("SELECT COUNT(*) AS v FROM products") or 0)

    def low_stock_count(self, threshold: int) -> int:
        sql = "SELECT COUNT(*) AS v FROM products WHERE is_active = 1 AND stock_quantity <= ?"
        return int(self._scalar(sql, (int(threshold),)) or 0)

    def customer_count(self) -> int:
        sql = "SELECT COUNT(*) AS v FROM customers WHERE customer_type <> 'anonymous'"
        return int(self._scalar(sql) or 0)

    # ------------------------------- Helpers --------------------------------

    def _scalar(self, sql: str, params: Tuple[Any, ...] | List[Any] | None = None) -> Any:
        row = self.conn.execute(sql, params or []).fetchone()
        return None if row is None else row[0]

    def _rows(self, sql: str, params: Tuple[Any, ...] | List[Any] | None = None) -> List[sqlite3.Row]:
        return self.conn.execute(sql, params or []).fetchall()
