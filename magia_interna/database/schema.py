from pathlib import Path
import logging
import sqlite3
import sys

_log = logging.getLogger(__name__)

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== CORE TABLES ======================== */

/* -------- settings -------- */
CREATE TABLE IF NOT EXISTS app_settings (
    key   TEXT PRIMARY KEY,
    value TEXT
);

/* -------- products -------- */
CREATE TABLE IF NOT EXISTS products (
    product_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    name           TEXT NOT NULL CHECK (length(name) BETWEEN 1 AND 60),
    description    TEXT,
    sku            TEXT NOT NULL UNIQUE,
    category       TEXT NOT NULL,
    size           TEXT,
    color          TEXT,
    price          NUMERIC NOT NULL DEFAULT 0 CHECK (price >= 0),
    cost           NUMERIC NOT NULL DEFAULT 0 CHECK (cost >= 0),
    stock_quantity INTEGER NOT NULL DEFAULT 0 CHECK (stock_quantity >= 0),
    min_stock      INTEGER NOT NULL DEFAULT 5 CHECK (min_stock >= 0),
    image_url      TEXT,
    is_active      INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1)),
    created_at     TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at     TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_products_category ON products(category);

/* -------- customers -------- */
CREATE TABLE IF NOT EXISTS customers (
    customer_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    name               TEXT NOT NULL CHECK (length(name) BETWEEN 1 AND 60),
    email              TEXT,
    phone              TEXT,
    address            TEXT,
    city               TEXT,
    postal_code        TEXT,
    document_type      TEXT CHECK (document_type IS NULL OR document_type IN ('CC','CE','NIT','PAS','OTRO')),
    document_number    TEXT,
    birth_date         DATE,
    customer_type      TEXT NOT NULL DEFAULT 'regular'
                       CHECK (customer_type IN ('regular','premium','vip','anonymous')),
    is_active          INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1)),
    total_purchases    NUMERIC NOT NULL DEFAULT 0,
    last_purchase_date DATE,
    created_at         TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_customers_name ON customers(name);

/* -------- sales -------- */
CREATE TABLE IF NOT EXISTS sales (
    sale_id         INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_id     INTEGER,
    payment_method  TEXT NOT NULL CHECK (payment_method IN ('efectivo','tarjeta','transferencia')),
    discount_amount NUMERIC NOT NULL DEFAULT 0 CHECK (discount_amount >= 0),
    tax_amount      NUMERIC NOT NULL DEFAULT 0 CHECK (tax_amount >= 0),
    delivery_fee    NUMERIC NOT NULL DEFAULT 0 CHECK (delivery_fee >= 0),
    total_amount    NUMERIC NOT NULL DEFAULT 0,
    status          TEXT NOT NULL DEFAULT 'completed' CHECK (status IN ('completed','cancelled')),
    notes           TEXT,
    sale_date       DATE NOT NULL DEFAULT CURRENT_DATE,
    created_at      TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (customer_id) REFERENCES customers(customer_id)
);
CREATE INDEX IF NOT EXISTS idx_sales_date ON sales(sale_date);
CREATE INDEX IF NOT EXISTS idx_sales_customer ON sales(customer_id);

CREATE TABLE IF NOT EXISTS sale_items (
    item_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    sale_id     INTEGER NOT NULL,
    product_id  INTEGER NOT NULL,
    quantity    INTEGER NOT NULL CHECK (quantity >= 1),
    unit_price  NUMERIC NOT NULL CHECK (unit_price >= 0),
    total_price NUMERIC NOT NULL,
    unit_cost   NUMERIC,
    FOREIGN KEY (sale_id) REFERENCES sales(sale_id) ON DELETE CASCADE,
    FOREIGN KEY (product_id) REFERENCES products(product_id)
);
CREATE INDEX IF NOT EXISTS idx_sale_items_sale ON sale_items(sale_id);
CREATE INDEX IF NOT EXISTS idx_sale_items_product ON sale_items(product_id);

/* -------- expenses -------- */
CREATE TABLE IF NOT EXISTS expenses (
    expense_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    description    TEXT NOT NULL,
    amount         NUMERIC NOT NULL CHECK (amount >= 0),
    category       TEXT NOT NULL,
    payment_method TEXT NOT NULL DEFAULT 'efectivo'
                   CHECK (payment_method IN ('efectivo','tarjeta','transferencia','domiciliacion')),
    expense_date   DATE NOT NULL DEFAULT CURRENT_DATE,
    notes          TEXT,
    receipt_ref    TEXT,
    created_at     TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(expense_date);

/* ======================== TRIGGERS ======================== */

/* customers.total_purchases / last_purchase_date follow completed sales */
DROP TRIGGER IF EXISTS trg_customer_totals_ai;
CREATE TRIGGER trg_customer_totals_ai
AFTER INSERT ON sales
FOR EACH ROW
WHEN NEW.customer_id IS NOT NULL
BEGIN
  UPDATE customers
     SET total_purchases = (
            SELECT COALESCE(SUM(CAST(total_amount AS REAL)), 0.0)
              FROM sales WHERE customer_id = NEW.customer_id AND status = 'completed'),
         last_purchase_date = (
            SELECT MAX(sale_date)
              FROM sales WHERE customer_id = NEW.customer_id AND status = 'completed')
   WHERE customer_id = NEW.customer_id;
END;

DROP TRIGGER IF EXISTS trg_customer_totals_au;
CREATE TRIGGER trg_customer_totals_au
AFTER UPDATE OF customer_id, total_amount, status, sale_date ON sales
FOR EACH ROW
BEGIN
  UPDATE customers
     SET total_purchases = (
            SELECT COALESCE(SUM(CAST(total_amount AS REAL)), 0.0)
              FROM sales WHERE customer_id = customers.customer_id AND status = 'completed'),
         last_purchase_date = (
            SELECT MAX(sale_date)
              FROM sales WHERE customer_id = customers.customer_id AND status = 'completed')
   WHERE customer_id IN (OLD.customer_id, NEW.customer_id);
END;

DROP TRIGGER IF EXISTS trg_customer_totals_ad;
CREATE TRIGGER trg_customer_totals_ad
AFTER DELETE ON sales
FOR EACH ROW
WHEN OLD.customer_id IS NOT NULL
BEGIN
  UPDATE customers
     SET total_purchases = (
            SELECT COALESCE(SUM(CAST(total_amount AS REAL)), 0.0)
              FROM sales WHERE customer_id = OLD.customer_id AND status = 'completed'),
         last_purchase_date = (
            SELECT MAX(sale_date)
              FROM sales WHERE customer_id = OLD.customer_id AND status = 'completed')
   WHERE customer_id = OLD.customer_id;
END;

DROP TRIGGER IF EXISTS trg_products_touch_updated_at;
CREATE TRIGGER trg_products_touch_updated_at
AFTER UPDATE OF name, description, sku, category, size, color, price, cost, min_stock, image_url, is_active
ON products
FOR EACH ROW
BEGIN
  UPDATE products SET updated_at = CURRENT_TIMESTAMP WHERE product_id = NEW.product_id;
END;
"""


def _ensure_sale_items_unit_cost(conn: sqlite3.Connection) -> None:
    """
    Migration for databases created before sale_items.unit_cost existed.
    No-op if the column is already present.
    """
    cols = {row[1] for row in conn.execute("PRAGMA table_info(sale_items);").fetchall()}
    if "unit_cost" not in cols:
        conn.execute("ALTER TABLE sale_items ADD COLUMN unit_cost NUMERIC;")


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply the idempotent schema script and migrations on an open connection."""
    conn.executescript(SQL)
    _ensure_sale_items_unit_cost(conn)
    conn.commit()


def init_schema(db_path: Path | str) -> None:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        apply_schema(conn)
    finally:
        conn.close()
    _log.info("Schema applied to %s", db_path)


if __name__ == "__main__":
    from ..config import DB_PATH

    init_schema(sys.argv[1] if len(sys.argv) > 1 else DB_PATH)
