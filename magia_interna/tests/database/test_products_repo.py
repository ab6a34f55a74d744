import sqlite3

import pytest

from magia_interna.database.repositories.errors import DomainError
from magia_interna.database.repositories.products_repo import ProductsRepo


def test_create_defaults_and_read_back(conn):
    repo = ProductsRepo(conn)
    pid = repo.create({"name": "  Falda Midi ", "sku": "FM-01", "category": "Faldas", "price": 70000})
    p = repo.get(pid)
    assert p.name == "Falda Midi"
    assert p.min_stock == 5
    assert p.stock_quantity == 0
    assert p.is_active == 1


@pytest.mark.parametrize(
    "data",
    [
        {"name": "", "sku": "X", "category": "C"},
        {"name": "x" * 61, "sku": "X", "category": "C"},
        {"name": "Ok", "sku": "", "category": "C"},
        {"name": "Ok", "sku": "X", "category": ""},
        {"name": "Ok", "sku": "X", "category": "C", "price": -1},
        {"name": "Ok", "sku": "X", "category": "C", "stock_quantity": -2},
    ],
)
def test_invalid_products_are_rejected(conn, data):
    with pytest.raises(DomainError):
        ProductsRepo(conn).create(data)


def test_name_of_exactly_sixty_chars_is_accepted(conn):
    pid = ProductsRepo(conn).create({"name": "x" * 60, "sku": "LONG", "category": "C"})
    assert len(ProductsRepo(conn).get(pid).name) == 60


def test_duplicate_sku_violates_unique(conn, ids):
    with pytest.raises(sqlite3.IntegrityError):
        ProductsRepo(conn).create({"name": "Otra blusa", "sku": "BL-01", "category": "Blusas"})


def test_search_matches_name_or_sku(conn, ids):
    repo = ProductsRepo(conn)
    assert [p.sku for p in repo.list_products("jean")] == ["JN-01"]
    assert [p.name for p in repo.list_products("vs-0")] == ["Vestido Floral"]
    assert [p.name for p in repo.list_products(category="Blusas")] == ["Blusa Lino"]


def test_low_stock_uses_own_minimum_or_threshold(conn, ids):
    repo = ProductsRepo(conn)
    assert [p.sku for p in repo.low_stock()] == ["JN-01"]
    assert [p.sku for p in repo.low_stock(threshold=8)] == ["JN-01", "VS-01"]


def test_counts_and_categories(conn, ids):
    repo = ProductsRepo(conn)
    assert repo.categories() == ["Blusas", "Pantalones", "Vestidos"]
    assert repo.count_active() == 3
    assert repo.units_in_stock() == 21
    repo.deactivate(ids["vestido"])
    assert repo.count_active() == 2
    assert repo.units_in_stock() == 13
    assert [p.sku for p in repo.list_products(active_only=True)] == ["BL-01", "JN-01"]


def test_update_changes_fields(conn, ids):
    repo = ProductsRepo(conn)
    data = {"name": "Blusa Lino Blanca", "sku": "BL-01", "category": "Blusas",
            "price": 55000, "cost": 20000, "stock_quantity": 12, "min_stock": 4}
    repo.update(ids["blusa"], data)
    p = repo.get(ids["blusa"])
    assert (p.name, p.price, p.stock_quantity, p.min_stock) == ("Blusa Lino Blanca", 55000, 12, 4)


def test_update_unknown_product(conn):
    with pytest.raises(DomainError):
        ProductsRepo(conn).update(404, {"name": "X", "sku": "X", "category": "C"})


def test_sold_product_cannot_be_deleted(conn, ids, make_sale):
    make_sale([(ids["blusa"], 1, 50000)], ids["ana"])
    repo = ProductsRepo(conn)
    with pytest.raises(DomainError):
        repo.delete(ids["blusa"])
    repo.delete(ids["vestido"])
    assert repo.get(ids["vestido"]) is None


def test_stock_map_is_fresh(conn, ids, make_sale):
    make_sale([(ids["blusa"], 3, 50000)], ids["ana"])
    assert ProductsRepo(conn).stock_map()[ids["blusa"]] == 7
