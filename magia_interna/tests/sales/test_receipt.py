import pytest

from magia_interna.database.repositories.errors import NotFoundError
from magia_interna.modules.sales.model import SalesTableModel
from magia_interna.modules.sales.receipt import RECEIPT_TEMPLATE, receipt_context
from magia_interna.utils.templating import render


def test_receipt_context_for_known_customer(conn, ids, make_sale):
    sid = make_sale([(ids["blusa"], 2, 50000), (ids["vestido"], 1, 90000)], ids["ana"],
                    payment_method="tarjeta", delivery=8000)
    ctx = receipt_context(conn, sid)

    assert ctx["customer_name"] == "Ana Gómez"
    assert ctx["payment_label"] == "Tarjeta"
    assert ctx["subtotal"] == pytest.approx(190000)
    assert [it["sku"] for it in ctx["items"]] == ["BL-01", "VS-01"]
    assert ctx["sale"]["total_amount"] == pytest.approx(198000)


def test_receipt_renders_with_company_data(conn, ids, make_sale):
    sid = make_sale([(ids["blusa"], 1, 50000)])
    html = render(RECEIPT_TEMPLATE, receipt_context(conn, sid))

    assert "Cliente Anónimo" in html
    assert "$50.000" in html
    assert f"Venta #{sid}" in html
    assert "Magia Interna" in html


def test_receipt_marks_cancelled_sales(conn, ids, make_sale):
    from magia_interna.database.repositories.sales_repo import SalesRepo

    sid = make_sale([(ids["blusa"], 1, 50000)], ids["luis"])
    SalesRepo(conn).cancel_sale(sid)
    assert "ANULADA" in render(RECEIPT_TEMPLATE, receipt_context(conn, sid))


def test_receipt_for_unknown_sale(conn):
    with pytest.raises(NotFoundError):
        receipt_context(conn, 12345)


def test_sales_table_shows_dates_without_birthday_wording(qapp):
    model = SalesTableModel([
        {"sale_id": 1, "sale_date": "2025-03-10", "customer_name": "Ana Gómez",
         "payment_method": "efectivo", "delivery_fee": 0, "total_amount": 50000,
         "status": "completed"},
        {"sale_id": 2, "sale_date": None, "customer_name": "Luis Pérez",
         "payment_method": "tarjeta", "delivery_fee": 0, "total_amount": 90000,
         "status": "completed"},
    ])
    assert model.data(model.index(0, 1)) == "10/03/2025"
    assert model.data(model.index(1, 1)) == ""
