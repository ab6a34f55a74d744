import pytest

from magia_interna.constants import ANONYMOUS_CUSTOMER_NAME
from magia_interna.database.repositories.customers_repo import CustomersRepo
from magia_interna.database.repositories.errors import (
    DomainError,
    InsufficientStockError,
    NotFoundError,
)
from magia_interna.database.repositories.sales_repo import SaleHeader, SaleItem, SalesRepo


def _count_sales(conn) -> int:
    return int(conn.execute("SELECT COUNT(*) FROM sales").fetchone()[0])


def test_create_sale_takes_stock_and_stores_lines(conn, ids, make_sale, stock):
    sid = make_sale([(ids["blusa"], 2, 50000)], ids["ana"])

    assert stock(ids["blusa"]) == 8
    items = SalesRepo(conn).list_items(sid)
    assert len(items) == 1
    assert items[0]["quantity"] == 2
    assert items[0]["total_price"] == pytest.approx(100000)
    # cost snapshot taken from the product at sale time
    assert items[0]["unit_cost"] == pytest.approx(20000)


def test_grand_total_example_is_persisted(conn, ids, make_sale):
    sid = make_sale([(ids["blusa"], 2, 50000)], ids["ana"], tax=5000, discount=2000, delivery=3000)
    header = SalesRepo(conn).get_header(sid)
    assert header.total_amount == pytest.approx(106000)
    assert header.delivery_fee == pytest.approx(3000)


def test_insufficient_stock_refuses_sale(conn, ids, make_sale, stock):
    with pytest.raises(InsufficientStockError) as exc:
        make_sale([(ids["jean"], 5, 120000)], ids["ana"])

    assert exc.value.available == 3
    assert exc.value.requested == 5
    assert stock(ids["jean"]) == 3
    assert _count_sales(conn) == 0


def test_failed_line_rolls_back_whole_sale(conn, ids, make_sale, stock):
    with pytest.raises(InsufficientStockError):
        make_sale([(ids["blusa"], 2, 50000), (ids["jean"], 5, 120000)], ids["luis"])

    assert stock(ids["blusa"]) == 10
    assert _count_sales(conn) == 0
    assert conn.execute("SELECT COUNT(*) FROM sale_items").fetchone()[0] == 0


def test_missing_customer_falls_back_to_anonymous(conn, ids, make_sale):
    first = make_sale([(ids["blusa"], 1, 50000)])
    second = make_sale([(ids["vestido"], 1, 90000)])

    repo = SalesRepo(conn)
    anon_id = repo.get_header(first).customer_id
    assert anon_id is not None
    assert repo.get_header(second).customer_id == anon_id

    customers = CustomersRepo(conn)
    assert customers.get(anon_id).name == ANONYMOUS_CUSTOMER_NAME
    # hidden from the customers screen
    assert anon_id not in {c.customer_id for c in customers.list_customers()}


def test_refused_anonymous_sale_leaves_no_anonymous_customer(conn, ids, make_sale):
    with pytest.raises(InsufficientStockError):
        make_sale([(ids["jean"], 5, 120000)])

    assert _count_sales(conn) == 0
    n = conn.execute(
        "SELECT COUNT(*) FROM customers WHERE customer_type='anonymous'"
    ).fetchone()[0]
    assert n == 0


def test_header_total_must_match_lines(conn, ids):
    header = SaleHeader(None, ids["ana"], "efectivo", 0, 0, 0, total_amount=1)
    items = [SaleItem(None, None, ids["blusa"], 1, 50000, 50000)]
    with pytest.raises(DomainError):
        SalesRepo(conn).create_sale(header, items)


def test_empty_sale_is_rejected(conn, ids):
    header = SaleHeader(None, ids["ana"], "efectivo", 0, 0, 0, 0)
    with pytest.raises(DomainError):
        SalesRepo(conn).create_sale(header, [])


def test_update_gives_back_old_units_first(conn, ids, make_sale, stock):
    sid = make_sale([(ids["blusa"], 2, 50000)], ids["ana"])
    assert stock(ids["blusa"]) == 8

    repo = SalesRepo(conn)
    header = repo.get_header(sid)
    header.total_amount = 500000
    repo.update_sale(header, [SaleItem(None, sid, ids["blusa"], 10, 50000, 500000)])

    # all ten units are available to the edited sale
    assert stock(ids["blusa"]) == 0
    assert [r["quantity"] for r in repo.list_items(sid)] == [10]


def test_failed_update_keeps_previous_sale(conn, ids, make_sale, stock):
    sid = make_sale([(ids["blusa"], 2, 50000)], ids["ana"])
    repo = SalesRepo(conn)
    header = repo.get_header(sid)
    header.total_amount = 600000

    with pytest.raises(InsufficientStockError):
        repo.update_sale(header, [SaleItem(None, sid, ids["jean"], 5, 120000, 600000)])

    assert stock(ids["blusa"]) == 8
    assert stock(ids["jean"]) == 3
    assert [r["product_id"] for r in repo.list_items(sid)] == [ids["blusa"]]


def test_cancel_restores_stock_once(conn, ids, make_sale, stock):
    sid = make_sale([(ids["vestido"], 3, 90000)], ids["luis"])
    repo = SalesRepo(conn)

    repo.cancel_sale(sid)
    repo.cancel_sale(sid)

    assert stock(ids["vestido"]) == 8
    assert repo.get_header(sid).status == "cancelled"


def test_cancelled_sale_cannot_be_edited(conn, ids, make_sale):
    sid = make_sale([(ids["vestido"], 1, 90000)], ids["luis"])
    repo = SalesRepo(conn)
    repo.cancel_sale(sid)
    header = repo.get_header(sid)
    with pytest.raises(DomainError):
        repo.update_sale(header, [SaleItem(None, sid, ids["vestido"], 1, 90000, 90000)])


def test_delete_restores_stock(conn, ids, make_sale, stock):
    sid = make_sale([(ids["blusa"], 4, 50000)], ids["ana"])
    SalesRepo(conn).delete_sale(sid)

    assert stock(ids["blusa"]) == 10
    assert _count_sales(conn) == 0


def test_delete_cancelled_sale_does_not_restore_twice(conn, ids, make_sale, stock):
    sid = make_sale([(ids["blusa"], 4, 50000)], ids["ana"])
    repo = SalesRepo(conn)
    repo.cancel_sale(sid)
    repo.delete_sale(sid)
    assert stock(ids["blusa"]) == 10


def test_unknown_sale_raises_not_found(conn):
    with pytest.raises(NotFoundError):
        SalesRepo(conn).cancel_sale(999)
    with pytest.raises(NotFoundError):
        SalesRepo(conn).delete_sale(999)


def test_customer_totals_follow_completed_sales(conn, ids, make_sale):
    sid = make_sale([(ids["blusa"], 2, 50000)], ids["ana"], sale_date="2025-04-02")
    customers = CustomersRepo(conn)

    ana = customers.get(ids["ana"])
    assert ana.total_purchases == pytest.approx(100000)
    assert ana.last_purchase_date == "2025-04-02"

    SalesRepo(conn).cancel_sale(sid)
    ana = customers.get(ids["ana"])
    assert ana.total_purchases == pytest.approx(0)
    assert ana.last_purchase_date is None


def test_list_sales_search_by_customer_or_method(conn, ids, make_sale):
    make_sale([(ids["blusa"], 1, 50000)], ids["ana"], payment_method="tarjeta")
    make_sale([(ids["vestido"], 1, 90000)], ids["luis"], payment_method="efectivo")
    repo = SalesRepo(conn)

    assert [r["customer_name"] for r in repo.list_sales("ana")] == ["Ana Gómez"]
    assert [r["payment_method"] for r in repo.list_sales("TARJETA")] == ["tarjeta"]
    assert len(repo.list_sales()) == 2
