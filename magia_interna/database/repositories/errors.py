# database/repositories/errors.py
from __future__ import annotations

import sqlite3
from contextlib import contextmanager


class DomainError(Exception):
    """Domain-level error the controller/UI can surface (message box)."""
    pass


class NotFoundError(DomainError):
    pass


class InsufficientStockError(DomainError):
    """
    Raised when a conditional stock decrement matched no row: the product
    is gone or holds fewer units than requested. The sale is rolled back.
    """

    def __init__(self, product_id: int, requested: int, available: int | None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        have = "desconocido" if available is None else str(available)
        super().__init__(
            f"Stock insuficiente para el producto #{product_id}: "
            f"solicitado {requested}, disponible {have}."
        )


@contextmanager
def immediate_tx(conn: sqlite3.Connection):
    """
    Start an IMMEDIATE transaction (write lock up front),
    commit on success, rollback on error.
    """
    cur = conn.cursor()
    try:
        cur.execute("BEGIN IMMEDIATE")
        yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
