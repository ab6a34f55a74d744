from __future__ import annotations
from dataclasses import dataclass, fields
import logging
import sqlite3

from ...constants import (
    ANONYMOUS_CUSTOMER_NAME,
    CUSTOMER_TYPES,
    DOCUMENT_TYPES,
    NAME_MAX_LENGTH,
)
from .errors import DomainError

_log = logging.getLogger(__name__)

_VALID_TYPES = {k for k, _ in CUSTOMER_TYPES}
_VALID_DOCS = {k for k, _ in DOCUMENT_TYPES}


@dataclass
class Customer:
    customer_id: int | None
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    document_type: str | None = None
    document_number: str | None = None
    birth_date: str | None = None
    customer_type: str = "regular"
    is_active: int = 1
    total_purchases: float = 0.0
    last_purchase_date: str | None = None

    @property
    def is_anonymous(self) -> bool:
        return self.customer_type == "anonymous"


_COLUMNS = ", ".join(f.name for f in fields(Customer))
_EDITABLE = (
    "name", "email", "phone", "address", "city", "postal_code",
    "document_type", "document_number", "birth_date", "customer_type", "is_active",
)


def _row_to_customer(r: sqlite3.Row) -> Customer:
    d = dict(r)
    d["total_purchases"] = float(d["total_purchases"] or 0)
    return Customer(**d)


class CustomersRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ---- Internal helpers -------------------------------------------------

    @staticmethod
    def _normalize_text(s: str | None) -> str | None:
        if s is None:
            return None
        s = str(s).strip()
        return s or None

    def _clean(self, data: dict) -> dict:
        name = self._normalize_text(data.get("name"))
        if not name:
            raise DomainError("El nombre es obligatorio.")
        if len(name) > NAME_MAX_LENGTH:
            raise DomainError(f"El nombre no puede exceder los {NAME_MAX_LENGTH} caracteres.")

        ctype = (data.get("customer_type") or "regular").strip()
        if ctype not in _VALID_TYPES:
            raise DomainError(f"Tipo de cliente no válido: {ctype}")
        doc = self._normalize_text(data.get("document_type"))
        if doc is not None and doc not in _VALID_DOCS:
            raise DomainError(f"Tipo de documento no válido: {doc}")

        out = {k: self._normalize_text(data.get(k)) for k in _EDITABLE}
        out["name"] = name
        out["customer_type"] = ctype
        out["document_type"] = doc
        out["is_active"] = 1 if data.get("is_active", 1) else 0
        return out

    # ---- Queries ----------------------------------------------------------

    def list_customers(
        self,
        search: str | None = None,
        active_only: bool = True,
        include_anonymous: bool = False,
    ) -> list[Customer]:
        """
        Customers ordered by name. The anonymous walk-in row is hidden
        unless `include_anonymous` is set. `search` matches name or e-mail.
        """
        sql = f"SELECT {_COLUMNS} FROM customers WHERE 1=1"
        params: list = []
        if active_only:
            sql += " AND is_active = 1"
        if not include_anonymous:
            sql += " AND customer_type <> 'anonymous'"
        if search:
            like = f"%{search.strip().lower()}%"
            sql += " AND (LOWER(name) LIKE ? OR LOWER(COALESCE(email,'')) LIKE ?)"
            params += [like, like]
        sql += " ORDER BY name COLLATE NOCASE"
        return [_row_to_customer(r) for r in self.conn.execute(sql, params).fetchall()]

    def get(self, customer_id: int) -> Customer | None:
        r = self.conn.execute(
            f"SELECT {_COLUMNS} FROM customers WHERE customer_id=?",
            (customer_id,),
        ).fetchone()
        return _row_to_customer(r) if r else None

    def with_birth_date(self) -> list[Customer]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM customers "
            "WHERE is_active = 1 AND customer_type <> 'anonymous' "
            "AND birth_date IS NOT NULL AND birth_date <> '' "
            "ORDER BY name COLLATE NOCASE"
        ).fetchall()
        return [_row_to_customer(r) for r in rows]

    def with_email(self) -> list[Customer]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM customers "
            "WHERE is_active = 1 AND customer_type <> 'anonymous' "
            "AND email IS NOT NULL AND TRIM(email) <> '' "
            "ORDER BY name COLLATE NOCASE"
        ).fetchall()
        return [_row_to_customer(r) for r in rows]

    def count_by_type(self) -> dict[str, int]:
        rows = self.conn.execute(
            "SELECT COALESCE(customer_type, 'regular') AS t, COUNT(*) AS n "
            "FROM customers WHERE customer_type <> 'anonymous' GROUP BY t ORDER BY t"
        ).fetchall()
        return {r["t"]: int(r["n"]) for r in rows}

    def count_active(self) -> int:
        return int(self.conn.execute(
            "SELECT COUNT(*) FROM customers WHERE is_active=1 AND customer_type <> 'anonymous'"
        ).fetchone()[0])

    # ---- Anonymous walk-in customer --------------------------------------

    def ensure_anonymous(self) -> int:
        """
        Return the id of the "Cliente Anónimo" row, creating it if missing
        and reactivating it if it was deactivated. Commits.
        """
        with self.conn:
            return self.anonymous_id()

    def anonymous_id(self) -> int:
        """Same as ensure_anonymous() but leaves the caller's transaction open."""
        r = self.conn.execute(
            "SELECT customer_id, is_active FROM customers "
            "WHERE customer_type='anonymous' OR name=? "
            "ORDER BY customer_type='anonymous' DESC, customer_id LIMIT 1",
            (ANONYMOUS_CUSTOMER_NAME,),
        ).fetchone()
        if r is None:
            cur = self.conn.execute(
                "INSERT INTO customers(name, customer_type, is_active) VALUES (?, 'anonymous', 1)",
                (ANONYMOUS_CUSTOMER_NAME,),
            )
            _log.info("Created anonymous customer #%s", cur.lastrowid)
            return int(cur.lastrowid)
        if not r["is_active"]:
            self.conn.execute(
                "UPDATE customers SET is_active=1, customer_type='anonymous' WHERE customer_id=?",
                (r["customer_id"],),
            )
            _log.info("Reactivated anonymous customer #%s", r["customer_id"])
        return int(r["customer_id"])

    # ---- Mutations --------------------------------------------------------

    def create(self, data: dict) -> int:
        c = self._clean(data)
        cols = ", ".join(c.keys())
        marks = ", ".join("?" for _ in c)
        with self.conn:
            cur = self.conn.execute(
                f"INSERT INTO customers({cols}) VALUES ({marks})", tuple(c.values())
            )
        return int(cur.lastrowid)

    def update(self, customer_id: int, data: dict) -> None:
        c = self._clean(data)
        assignments = ", ".join(f"{k}=?" for k in c.keys())
        with self.conn:
            cur = self.conn.execute(
                f"UPDATE customers SET {assignments} WHERE customer_id=?",
                (*c.values(), customer_id),
            )
        if cur.rowcount == 0:
            raise DomainError(f"Cliente #{customer_id} no encontrado.")

    def delete(self, customer_id: int) -> None:
        """Customers with sales cannot be removed; deactivate them instead."""
        has_sales = self.conn.execute(
            "SELECT 1 FROM sales WHERE customer_id=? LIMIT 1", (customer_id,)
        ).fetchone()
        if has_sales:
            raise DomainError(
                "No se puede eliminar: el cliente tiene ventas registradas. "
                "Desactívelo en su lugar."
            )
        with self.conn:
            self.conn.execute("DELETE FROM customers WHERE customer_id=?", (customer_id,))


__all__ = ["Customer", "CustomersRepo", "DomainError"]
