from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class BillLine:
    product_id: int
    quantity: int
    price: float
    discount: float = 0.0
    gst_percent: float = 0.0

    @property
    def subtotal(self) -> float:
        # discount is per unit
        return line_subtotal(self.price, self.quantity, self.discount)

    @property
    def gst(self) -> float:
        return self.subtotal * self.gst_percent / 100.0

    def to_payload(self) -> dict[str, float | int]:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "discount": self.discount,
        }


@dataclass(frozen=True)
class BillTotals:
    item_total: float
    gst_total: float
    bill_discount: float
    grand_total: float


def line_subtotal(price: float, quantity: int, discount: float = 0.0) -> float:
    return (price - discount) * quantity


def bill_totals(lines: Iterable[BillLine], bill_discount: float = 0.0) -> BillTotals:
    lines = list(lines)
    item_total = sum(line.subtotal for line in lines)
    gst_total = sum(line.gst for line in lines)
    return BillTotals(
        item_total=item_total,
        gst_total=gst_total,
        bill_discount=bill_discount,
        grand_total=item_total + gst_total - bill_discount,
    )


def po_line_subtotal(quantity: int, unit_price: float, discount_percent: float = 0.0) -> float:
    base = quantity * unit_price
    return base - base * (discount_percent / 100.0)


def purchase_order_total(
    line_subtotals: Iterable[float],
    *,
    tax_amount: float = 0.0,
    shipping_cost: float = 0.0,
    discount_amount: float = 0.0,
) -> float:
    return sum(line_subtotals) + tax_amount + shipping_cost - discount_amount
