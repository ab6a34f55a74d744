# magia_interna/database/repositories/products_repo.py
from dataclasses import dataclass, fields
from typing import Optional, Dict, List
import sqlite3

from ...constants import DEFAULT_MIN_STOCK, NAME_MAX_LENGTH
from .errors import DomainError, immediate_tx


@dataclass
class Product:
    product_id: int | None
    name: str
    sku: str
    category: str
    price: float
    cost: float
    stock_quantity: int
    min_stock: int = DEFAULT_MIN_STOCK
    description: str | None = None
    size: str | None = None
    color: str | None = None
    image_url: str | None = None
    is_active: int = 1

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.min_stock


_COLUMNS = ", ".join(f.name for f in fields(Product))


def _row_to_product(r: sqlite3.Row) -> Product:
    d = dict(r)
    d["price"] = float(d["price"] or 0)
    d["cost"] = float(d["cost"] or 0)
    d["stock_quantity"] = int(d["stock_quantity"] or 0)
    d["min_stock"] = int(d["min_stock"] or 0)
    return Product(**d)


class ProductsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ---------------------------- validation ----------------------------

    @staticmethod
    def _clean(data: Dict) -> Dict:
        name = (data.get("name") or "").strip()
        sku = (data.get("sku") or "").strip()
        category = (data.get("category") or "").strip()
        if not name:
            raise DomainError("El nombre es obligatorio.")
        if len(name) > NAME_MAX_LENGTH:
            raise DomainError(f"El nombre no puede exceder los {NAME_MAX_LENGTH} caracteres.")
        if not sku:
            raise DomainError("El SKU es obligatorio.")
        if not category:
            raise DomainError("La categoría es obligatoria.")

        price = float(data.get("price") or 0)
        cost = float(data.get("cost") or 0)
        stock = int(data.get("stock_quantity") or 0)
        min_stock = data.get("min_stock")
        min_stock = DEFAULT_MIN_STOCK if min_stock in (None, "") else int(min_stock)
        if price < 0 or cost < 0:
            raise DomainError("Precio y costo no pueden ser negativos.")
        if stock < 0 or min_stock < 0:
            raise DomainError("El stock no puede ser negativo.")

        def opt(key):
            v = data.get(key)
            if isinstance(v, str):
                v = v.strip()
            return v or None

        return {
            "name": name,
            "sku": sku,
            "category": category,
            "price": price,
            "cost": cost,
            "stock_quantity": stock,
            "min_stock": min_stock,
            "description": opt("description"),
            "size": opt("size"),
            "color": opt("color"),
            "image_url": opt("image_url"),
            "is_active": 1 if data.get("is_active", 1) else 0,
        }

    # ---------------------------- queries ----------------------------

    def list_products(
        self,
        search: str | None = None,
        category: str | None = None,
        active_only: bool = False,
    ) -> List[Product]:
        sql = f"SELECT {_COLUMNS} FROM products WHERE 1=1"
        params: list = []
        if search:
            sql += " AND (LOWER(name) LIKE ? OR LOWER(sku) LIKE ?)"
            like = f"%{search.strip().lower()}%"
            params += [like, like]
        if category:
            sql += " AND category = ?"
            params.append(category)
        if active_only:
            sql += " AND is_active = 1"
        sql += " ORDER BY name COLLATE NOCASE"
        return [_row_to_product(r) for r in self.conn.execute(sql, params).fetchall()]

    def get(self, product_id: int) -> Product | None:
        r = self.conn.execute(
            f"SELECT {_COLUMNS} FROM products WHERE product_id=?",
            (product_id,),
        ).fetchone()
        return _row_to_product(r) if r else None

    def categories(self) -> List[str]:
        rows = self.conn.execute(
            "SELECT DISTINCT category FROM products WHERE category IS NOT NULL ORDER BY category"
        ).fetchall()
        return [r["category"] for r in rows]

    def low_stock(self, threshold: Optional[int] = None) -> List[Product]:
        """
        Active products at or below their own min_stock, or at or below
        `threshold` when one is given.
        """
        if threshold is None:
            where = "stock_quantity <= min_stock"
            params: tuple = ()
        else:
            where = "stock_quantity <= ?"
            params = (int(threshold),)
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM products WHERE is_active=1 AND {where} "
            "ORDER BY stock_quantity, name COLLATE NOCASE",
            params,
        ).fetchall()
        return [_row_to_product(r) for r in rows]

    def stock_map(self) -> Dict[int, int]:
        """Fresh {product_id: stock_quantity} snapshot for the sale form."""
        rows = self.conn.execute("SELECT product_id, stock_quantity FROM products").fetchall()
        return {int(r["product_id"]): int(r["stock_quantity"]) for r in rows}

    def count_active(self) -> int:
        return int(self.conn.execute("SELECT COUNT(*) FROM products WHERE is_active=1").fetchone()[0])

    def units_in_stock(self) -> int:
        r = self.conn.execute(
            "SELECT COALESCE(SUM(stock_quantity), 0) FROM products WHERE is_active=1"
        ).fetchone()
        return int(r[0])

    # ---------------------------- writes ----------------------------

    def create(self, data: Dict) -> int:
        p = self._clean(data)
        cols = ", ".join(p.keys())
        marks = ", ".join("?" for _ in p)
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                f"INSERT INTO products({cols}) VALUES ({marks})",
                tuple(p.values()),
            )
            return int(cur.lastrowid)

    def update(self, product_id: int, data: Dict) -> None:
        p = self._clean(data)
        assignments = ", ".join(f"{k}=?" for k in p.keys())
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                f"UPDATE products SET {assignments} WHERE product_id=?",
                (*p.values(), product_id),
            )
            if cur.rowcount == 0:
                raise DomainError(f"Producto #{product_id} no encontrado.")

    def _is_referenced(self, product_id: int) -> bool:
        return self.conn.execute(
            "SELECT 1 FROM sale_items WHERE product_id=? LIMIT 1", (product_id,)
        ).fetchone() is not None

    def deactivate(self, product_id: int) -> None:
        with immediate_tx(self.conn):
            self.conn.execute("UPDATE products SET is_active=0 WHERE product_id=?", (product_id,))

    def delete(self, product_id: int) -> None:
        """
        Hard delete for products never sold. Sold products must be
        deactivated instead so past sales keep their lines.
        """
        if self._is_referenced(product_id):
            raise DomainError(
                "No se puede eliminar: el producto tiene ventas registradas. "
                "Desactívelo en su lugar."
            )
        with immediate_tx(self.conn):
            self.conn.execute("DELETE FROM products WHERE product_id=?", (product_id,))


__all__ = ["Product", "ProductsRepo", "DomainError"]
