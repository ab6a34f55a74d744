# database/__init__.py
from __future__ import annotations

from pathlib import Path
import sqlite3

from ..config import DB_PATH
from . import schema as schema_module
from .seeders.default_data import seed as seed_default_data
from .versioning import stamp_if_missing


def prepare_connection(conn: sqlite3.Connection) -> sqlite3.Connection:
    """
    Bring an open connection up to date: row factory, foreign keys,
    schema, version stamp and default settings. Safe to repeat.
    """
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    schema_module.apply_schema(conn)
    stamp_if_missing(conn)
    seed_default_data(conn)
    conn.commit()
    return conn


def get_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """
    Returns a sqlite3.Connection with:
      - WAL mode
      - foreign_keys ON
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
    Ensures schema & seed data are applied idempotently.
    """
    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path)
    conn.execute("PRAGMA journal_mode = WAL;")
    return prepare_connection(conn)


__all__ = [
    "get_connection",
    "prepare_connection",
]
