"""Shared helpers for cart subtotal, shipping, tax and grand total."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from storefront.core.constants import FLAT_SHIPPING_FEE, FREE_SHIPPING_THRESHOLD, TAX_RATE
from storefront.domain.cart import CartLine


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    subtotal: Decimal
    shipping_fee: Decimal
    tax: Decimal
    total: Decimal


def calc_subtotal(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.line_total for line in lines), Decimal("0"))


def calc_shipping_fee(subtotal: Decimal) -> Decimal:
    # free only strictly above the threshold; an empty cart still pays the flat fee
    if subtotal > FREE_SHIPPING_THRESHOLD:
        return Decimal("0")
    return FLAT_SHIPPING_FEE


def calc_amount_to_free_shipping(subtotal: Decimal) -> Decimal:
    """Gap between the subtotal and the free-shipping threshold, shown on the cart view."""
    if subtotal < FREE_SHIPPING_THRESHOLD:
        return FREE_SHIPPING_THRESHOLD - subtotal
    return Decimal("0")


def calc_tax(subtotal: Decimal) -> Decimal:
    """18% of subtotal rounded half-up to a whole currency unit."""
    return (subtotal * TAX_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def calc_price_breakdown(lines: Iterable[CartLine]) -> PriceBreakdown:
    subtotal = calc_subtotal(lines)
    shipping_fee = calc_shipping_fee(subtotal)
    tax = calc_tax(subtotal)
    return PriceBreakdown(
        subtotal=subtotal,
        shipping_fee=shipping_fee,
        tax=tax,
        total=subtotal + shipping_fee + tax,
    )
