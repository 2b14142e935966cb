"""
Purchase order financial derivation

    subtotal        = sum(quantity * unit_price)
    discount_amount = subtotal * discount_rate / 100
    after_discount  = subtotal - discount_amount
    tax_amount      = after_discount * tax_rate / 100
    total           = after_discount + tax_amount

Intermediate values are exact Decimals. Only ``rounded_total`` is quantized to
the currency minor unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

HUNDRED = Decimal(100)


def to_decimal(value) -> Decimal:
    """Convert ints, strings, floats or Decimals without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(str(value))


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount_amount: Decimal
    after_discount: Decimal
    tax_amount: Decimal
    total: Decimal
    currency_decimals: int = 2

    @property
    def rounded_total(self) -> Decimal:
        return self.total.quantize(Decimal(1).scaleb(-self.currency_decimals), rounding=ROUND_HALF_UP)

    def to_dict(self) -> dict:
        return {
            "subtotal": str(self.subtotal),
            "discount_amount": str(self.discount_amount),
            "after_discount": str(self.after_discount),
            "tax_amount": str(self.tax_amount),
            "total": str(self.total),
            "rounded_total": str(self.rounded_total),
        }


def compute_totals(
    lines: Iterable[tuple[object, object]],
    tax_rate,
    discount_rate,
    currency_decimals: int = 2,
) -> OrderTotals:
    """
    Derive order totals from ``(quantity, unit_price)`` pairs and percentage rates.

    Pure function of its inputs: order creation and regeneration reproduce the
    same figures for the same lines and rates.
    """
    subtotal = sum((to_decimal(qty) * to_decimal(price) for qty, price in lines), Decimal(0))
    discount_amount = subtotal * to_decimal(discount_rate) / HUNDRED
    after_discount = subtotal - discount_amount
    tax_amount = after_discount * to_decimal(tax_rate) / HUNDRED
    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        after_discount=after_discount,
        tax_amount=tax_amount,
        total=after_discount + tax_amount,
        currency_decimals=currency_decimals,
    )


def order_totals(order, currency_decimals: int = 2) -> OrderTotals:
    """Totals of a persisted PurchaseOrder."""
    return compute_totals(
        ((line.quantity, line.unit_price) for line in order.lines),
        order.tax_rate,
        order.discount_rate,
        currency_decimals,
    )
