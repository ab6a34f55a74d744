import pytest

from magia_interna.database.repositories.sales_repo import SaleHeader, expected_total
from magia_interna.modules.sales.composer import (
    SaleDraft,
    SaleValidationError,
    clamp_money,
    clamp_quantity,
    grand_total,
)

STOCK = {1: 3, 2: 10}
PRICES = {1: 120000.0, 2: 50000.0}


def _draft() -> SaleDraft:
    return SaleDraft(stock=dict(STOCK), prices=dict(PRICES))


def test_reference_total_example():
    d = _draft()
    d.add_line(2, 2)
    d.set_adjustments(tax=5000, discount=2000, delivery=3000)
    assert d.total() == pytest.approx(106000)


@pytest.mark.parametrize(
    "lines, tax, delivery, discount",
    [
        ([0.0], 0, 0, 0),
        ([100000.0, 25000.0], 1900, 8000, 15000),
        ([10.0, 20.0, 30.0], 0, 5, 0),
    ],
)
def test_grand_total_matches_formula(lines, tax, delivery, discount):
    assert grand_total(lines, tax, delivery, discount) == pytest.approx(
        sum(lines) + tax + delivery - discount
    )


def test_negative_inputs_are_clamped():
    assert clamp_money(-5) == 0
    assert clamp_money("abc") == 0
    assert clamp_quantity(0) == 1
    assert clamp_quantity(None) == 1
    assert grand_total([100.0], -10, -10, -10) == pytest.approx(100)

    d = _draft()
    line = d.add_line(2, quantity=-4, unit_price=-1)
    assert (line.quantity, line.unit_price, line.total_price) == (1, 0, 0)


def test_selecting_product_prefills_price_and_recalculates():
    d = _draft()
    d.add_line()
    line = d.set_product(0, 2)
    assert line.unit_price == 50000
    assert line.total_price == 50000

    d.set_quantity(0, 3)
    assert d.lines[0].total_price == 150000
    d.set_unit_price(0, 45000)
    assert d.lines[0].total_price == 135000
    assert d.subtotal() == 135000


def test_insufficient_stock_detection():
    d = _draft()
    short = d.add_line(1, 5)
    ok = d.add_line(2, 10)
    unknown = d.add_line(99, 1000)
    assert d.has_insufficient_stock(short)
    assert not d.has_insufficient_stock(ok)
    assert not d.has_insufficient_stock(unknown)


def test_validate_blocks_empty_missing_and_short():
    d = _draft()
    with pytest.raises(SaleValidationError):
        d.validate()

    d.add_line(2, 1)
    d.add_line()
    with pytest.raises(SaleValidationError) as exc:
        d.validate()
    assert exc.value.line == 1

    d.remove_line(1)
    d.add_line(1, 5)
    with pytest.raises(SaleValidationError) as exc:
        d.validate()
    assert exc.value.line == 1


def test_to_payload_returns_consistent_header_and_items():
    d = _draft()
    d.add_line(2, 2)
    d.add_line(1, 1)
    d.set_adjustments(discount=10000, delivery=5000)
    header, items = d.to_payload(customer_id=None, payment_method="tarjeta",
                                 sale_date="2025-06-01", notes="  regalo ")

    assert header.total_amount == pytest.approx(100000 + 120000 + 5000 - 10000)
    assert header.notes == "regalo"
    assert header.customer_id is None
    assert [(it.product_id, it.quantity) for it in items] == [(2, 2), (1, 1)]
    assert expected_total(header, items) == pytest.approx(header.total_amount)


def test_editing_counts_units_already_held_by_the_sale():
    header = SaleHeader(7, 1, "efectivo", discount_amount=0, tax_amount=0,
                        delivery_fee=0, total_amount=240000)
    items = [{"product_id": 1, "quantity": 2, "unit_price": 120000}]
    # the stored sale took 2 of the product's units; 3 remain on the shelf
    d = SaleDraft.from_existing(header, items, STOCK, PRICES)

    assert d.available(1) == 5
    d.set_quantity(0, 5)
    assert not d.has_insufficient_stock(d.lines[0])
    d.set_quantity(0, 6)
    assert d.has_insufficient_stock(d.lines[0])
