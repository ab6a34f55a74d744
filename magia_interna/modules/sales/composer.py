# magia_interna/modules/sales/composer.py
"""
Sale composition: line totals, grand total and pre-submit validation.

    total_price = quantity * unit_price                  (per line)
    total       = Σ total_price + tax + delivery − discount

Money inputs are clamped to >= 0 and quantities to >= 1. The stock check
here works on a snapshot and is advisory; SalesRepo performs the
authoritative conditional decrement when the sale is written.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ...database.repositories.errors import DomainError
from ...database.repositories.sales_repo import SaleHeader, SaleItem
from ...utils.helpers import today_str


class SaleValidationError(DomainError):
    """Submission blocked. `line` is the offending row index, if any."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


def clamp_money(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    return v if v > 0 else 0.0


def clamp_quantity(value) -> int:
    try:
        q = int(value)
    except (TypeError, ValueError):
        return 1
    return q if q >= 1 else 1


def grand_total(line_totals: Iterable[float], tax: float, delivery: float, discount: float) -> float:
    return sum(line_totals) + clamp_money(tax) + clamp_money(delivery) - clamp_money(discount)


@dataclass
class SaleLine:
    product_id: Optional[int] = None
    quantity: int = 1
    unit_price: float = 0.0
    total_price: float = 0.0

    def recalc(self) -> None:
        self.total_price = self.quantity * self.unit_price


@dataclass
class SaleDraft:
    """
    Mutable sale being edited in the form.

    `stock` and `prices` are fresh snapshots keyed by product_id. When an
    existing sale is edited, `held` carries the units that sale already
    took so they count as available again.
    """
    stock: Dict[int, int] = field(default_factory=dict)
    prices: Dict[int, float] = field(default_factory=dict)
    held: Dict[int, int] = field(default_factory=dict)
    lines: List[SaleLine] = field(default_factory=list)
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    delivery_fee: float = 0.0

    # ---------------- construction ----------------

    @classmethod
    def from_existing(
        cls,
        header: SaleHeader,
        items: Iterable[Mapping],
        stock: Mapping[int, int],
        prices: Mapping[int, float],
    ) -> "SaleDraft":
        draft = cls(stock=dict(stock), prices=dict(prices))
        for it in items:
            pid = int(it["product_id"])
            qty = int(it["quantity"])
            draft.held[pid] = draft.held.get(pid, 0) + qty
            draft.add_line(pid, qty, float(it["unit_price"]))
        draft.set_adjustments(
            discount=header.discount_amount,
            tax=header.tax_amount,
            delivery=header.delivery_fee,
        )
        return draft

    # ---------------- line edits ----------------

    def add_line(
        self,
        product_id: Optional[int] = None,
        quantity: int = 1,
        unit_price: Optional[float] = None,
    ) -> SaleLine:
        if unit_price is None:
            unit_price = self.prices.get(product_id, 0.0) if product_id is not None else 0.0
        line = SaleLine(product_id, clamp_quantity(quantity), clamp_money(unit_price))
        line.recalc()
        self.lines.append(line)
        return line

    def remove_line(self, index: int) -> None:
        del self.lines[index]

    def set_product(self, index: int, product_id: Optional[int]) -> SaleLine:
        """Select a product; its list price becomes the line's unit price."""
        line = self.lines[index]
        line.product_id = product_id
        if product_id is not None and product_id in self.prices:
            line.unit_price = clamp_money(self.prices[product_id])
        line.recalc()
        return line

    def set_quantity(self, index: int, quantity) -> SaleLine:
        line = self.lines[index]
        line.quantity = clamp_quantity(quantity)
        line.recalc()
        return line

    def set_unit_price(self, index: int, price) -> SaleLine:
        line = self.lines[index]
        line.unit_price = clamp_money(price)
        line.recalc()
        return line

    def set_adjustments(self, *, discount=None, tax=None, delivery=None) -> None:
        if discount is not None:
            self.discount_amount = clamp_money(discount)
        if tax is not None:
            self.tax_amount = clamp_money(tax)
        if delivery is not None:
            self.delivery_fee = clamp_money(delivery)

    # ---------------- totals ----------------

    def subtotal(self) -> float:
        return sum(ln.total_price for ln in self.lines)

    def total(self) -> float:
        return grand_total(
            (ln.total_price for ln in self.lines),
            self.tax_amount,
            self.delivery_fee,
            self.discount_amount,
        )

    # ---------------- stock ----------------

    def available(self, product_id: Optional[int]) -> Optional[int]:
        if product_id is None or product_id not in self.stock:
            return None
        return self.stock[product_id] + self.held.get(product_id, 0)

    def has_insufficient_stock(self, line: SaleLine) -> bool:
        """True iff the line asks for more than the known stock; False for unknown products."""
        have = self.available(line.product_id)
        if have is None:
            return False
        return line.quantity > have

    # ---------------- submission ----------------

    def validate(self) -> None:
        if not self.lines:
            raise SaleValidationError("Debe agregar al menos un producto a la venta.")
        for i, ln in enumerate(self.lines):
            if ln.product_id is None:
                raise SaleValidationError(
                    f"Seleccione un producto en la línea {i + 1}.", line=i
                )
        for i, ln in enumerate(self.lines):
            if self.has_insufficient_stock(ln):
                raise SaleValidationError(
                    f"Stock insuficiente en la línea {i + 1}: "
                    f"solicitado {ln.quantity}, disponible {self.available(ln.product_id)}.",
                    line=i,
                )

    def to_payload(
        self,
        *,
        customer_id: Optional[int],
        payment_method: str,
        sale_date: Optional[str] = None,
        notes: Optional[str] = None,
        sale_id: Optional[int] = None,
    ) -> Tuple[SaleHeader, List[SaleItem]]:
        """Validate, then return the header and items ready for SalesRepo."""
        self.validate()
        for ln in self.lines:
            ln.recalc()
        header = SaleHeader(
            sale_id=sale_id,
            customer_id=customer_id,
            payment_method=payment_method,
            discount_amount=self.discount_amount,
            tax_amount=self.tax_amount,
            delivery_fee=self.delivery_fee,
            total_amount=self.total(),
            notes=(notes or "").strip() or None,
            sale_date=sale_date or today_str(),
        )
        items = [
            SaleItem(
                item_id=None,
                sale_id=sale_id,
                product_id=int(ln.product_id),
                quantity=ln.quantity,
                unit_price=ln.unit_price,
                total_price=ln.total_price,
            )
            for ln in self.lines
        ]
        return header, items
