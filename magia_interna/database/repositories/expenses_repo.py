from __future__ import annotations

"""
Repository for shop expenses.

Categories are a fixed list (see `constants.EXPENSE_CATEGORIES`) stored as
text on each row, as are payment methods. All monetary amounts are
returned as `float`; storage is NUMERIC.

Validation mirrors the expense form: non-empty description, non-negative
amount, a known category and a known payment method.
"""

import sqlite3
from dataclasses import dataclass
from typing import Optional, List, Dict

from ...constants import EXPENSE_CATEGORIES, EXPENSE_PAYMENT_METHODS
from .errors import DomainError

_VALID_METHODS = {k for k, _ in EXPENSE_PAYMENT_METHODS}

_SELECT = """
    SELECT expense_id,
           description,
           CAST(amount AS REAL) AS amount,
           category,
           payment_method,
           expense_date,
           notes,
           receipt_ref
    FROM expenses
"""


@dataclass
class Expense:
    expense_id: int | None
    description: str
    amount: float
    category: str
    payment_method: str
    expense_date: str
    notes: str | None = None
    receipt_ref: str | None = None


class ExpensesRepo:
    """
    CRUD and simple aggregates over `expenses`.

    Writes commit immediately.
    """

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _clean(e: Expense) -> tuple:
        if not e.description or not e.description.strip():
            raise DomainError("La descripción es obligatoria.")
        if e.amount is None or float(e.amount) < 0:
            raise DomainError("El monto no puede ser negativo.")
        if e.category not in EXPENSE_CATEGORIES:
            raise DomainError(f"Categoría no válida: {e.category}")
        if e.payment_method not in _VALID_METHODS:
            raise DomainError(f"Método de pago no válido: {e.payment_method}")
        if not e.expense_date:
            raise DomainError("La fecha es obligatoria.")
        return (
            e.description.strip(),
            float(e.amount),
            e.category,
            e.payment_method,
            e.expense_date,
            (e.notes or "").strip() or None,
            (e.receipt_ref or "").strip() or None,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search_expenses(
        self,
        query: str = "",
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> List[Expense]:
        """
        Expenses whose description or category contains `query`
        (case-insensitive), optionally within an inclusive date range.
        Newest first.
        """
        where: List[str] = []
        params: List = []
        if query:
            like = f"%{query.strip().lower()}%"
            where.append("(LOWER(description) LIKE ? OR LOWER(category) LIKE ?)")
            params += [like, like]
        if date_from:
            where.append("DATE(expense_date) >= DATE(?)")
            params.append(date_from)
        if date_to:
            where.append("DATE(expense_date) <= DATE(?)")
            params.append(date_to)
        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY DATE(expense_date) DESC, expense_id DESC"
        return [Expense(**dict(r)) for r in self.conn.execute(sql, params).fetchall()]

    def get_expense(self, expense_id: int) -> Expense | None:
        row = self.conn.execute(_SELECT + " WHERE expense_id = ?", (expense_id,)).fetchone()
        return Expense(**dict(row)) if row else None

    def total_between(self, date_from: str, date_to: str) -> float:
        r = self.conn.execute(
            "SELECT COALESCE(SUM(CAST(amount AS REAL)), 0.0) FROM expenses "
            "WHERE DATE(expense_date) BETWEEN DATE(?) AND DATE(?)",
            (date_from, date_to),
        ).fetchone()
        return float(r[0])

    def total_by_category(
        self, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> List[Dict]:
        """
        Amount spent per category, largest first. Categories without
        expenses are omitted.
        """
        sql = (
            "SELECT category, CAST(COALESCE(SUM(amount), 0) AS REAL) AS total_amount "
            "FROM expenses"
        )
        params: List = []
        if date_from and date_to:
            sql += " WHERE DATE(expense_date) BETWEEN DATE(?) AND DATE(?)"
            params += [date_from, date_to]
        sql += " GROUP BY category ORDER BY total_amount DESC, category"
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_expense(self, e: Expense) -> int:
        cur = self.conn.execute(
            """
            INSERT INTO expenses(description, amount, category, payment_method,
                                 expense_date, notes, receipt_ref)
            VALUES (?,?,?,?,?,?,?)
            """,
            self._clean(e),
        )
        self.conn.commit()
        return int(cur.lastrowid)

    def update_expense(self, e: Expense) -> None:
        if e.expense_id is None:
            raise DomainError("Falta el identificador del gasto.")
        cur = self.conn.execute(
            """
            UPDATE expenses
               SET description=?, amount=?, category=?, payment_method=?,
                   expense_date=?, notes=?, receipt_ref=?
             WHERE expense_id=?
            """,
            (*self._clean(e), e.expense_id),
        )
        self.conn.commit()
        if cur.rowcount == 0:
            raise DomainError(f"Gasto #{e.expense_id} no encontrado.")

    def delete_expense(self, expense_id: int) -> None:
        self.conn.execute("DELETE FROM expenses WHERE expense_id = ?", (expense_id,))
        self.conn.commit()


__all__ = ["Expense", "ExpensesRepo", "DomainError"]
