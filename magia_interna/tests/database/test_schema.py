import sqlite3

import pytest

from magia_interna.constants import SCHEMA_VERSION
from magia_interna.database import get_connection, prepare_connection
from magia_interna.database.versioning import get_current_version


def test_prepare_connection_is_idempotent(conn):
    prepare_connection(conn)
    assert get_current_version(conn) == str(SCHEMA_VERSION)
    n = conn.execute("SELECT COUNT(*) FROM app_settings").fetchone()[0]
    prepare_connection(conn)
    assert conn.execute("SELECT COUNT(*) FROM app_settings").fetchone()[0] == n


def test_foreign_keys_enforced(conn):
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO sale_items(sale_id, product_id, quantity, unit_price, total_price) "
            "VALUES (999, 999, 1, 1, 1)"
        )


def test_negative_stock_is_impossible(conn, ids):
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute("UPDATE products SET stock_quantity=-1 WHERE product_id=?", (ids["blusa"],))


def test_get_connection_creates_file(tmp_path):
    path = tmp_path / "sub" / "shop.db"
    con = get_connection(path)
    try:
        assert path.exists()
        assert con.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        assert con.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
    finally:
        con.close()
