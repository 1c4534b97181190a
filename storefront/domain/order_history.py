"""Normalization of order records returned by the order API.

Server records come in a few historical shapes (``items`` vs ``orderItems``,
``pricing.total`` vs ``totalPrice``, ``quantity`` vs ``qty``); these helpers
flatten them into one read model for the account pages.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from storefront.domain.cart import to_money


@dataclass(frozen=True, slots=True)
class OrderItemSummary:
    name: str
    quantity: int
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True, slots=True)
class OrderSummary:
    order_id: str
    order_number: str
    status: str
    created_at: str | None
    payment_method: str
    payment_status: str
    total: Decimal
    items: tuple[OrderItemSummary, ...] = ()
    shipping_address: dict[str, Any] = field(default_factory=dict)


def _safe_money(value: Any) -> Decimal:
    try:
        return to_money(value if value is not None else 0)
    except ValueError:
        return Decimal("0")


def _safe_quantity(item: dict[str, Any]) -> int:
    raw = item.get("quantity") or item.get("qty") or 1
    try:
        qty = int(raw)
    except (TypeError, ValueError):
        return 1
    return qty if qty > 0 else 1


def normalize_order_item(item: dict[str, Any]) -> OrderItemSummary:
    return OrderItemSummary(
        name=str(item.get("name") or "Unknown Plant"),
        quantity=_safe_quantity(item),
        price=_safe_money(item.get("price")),
    )


def normalize_order(raw: dict[str, Any], index: int = 0) -> OrderSummary:
    order_id = str(raw.get("_id") or "")
    if raw.get("orderNumber"):
        order_number = str(raw["orderNumber"])
    elif order_id:
        order_number = f"ORD-{order_id[-8:]}"
    else:
        order_number = f"ORDER-{index + 1}"

    payment = raw.get("payment") if isinstance(raw.get("payment"), dict) else {}
    pricing = raw.get("pricing") if isinstance(raw.get("pricing"), dict) else {}
    raw_items = raw.get("items") or raw.get("orderItems") or []
    shipping = raw.get("shippingAddress")

    return OrderSummary(
        order_id=order_id,
        order_number=order_number,
        status=str(raw.get("status") or raw.get("orderStatus") or "pending").lower(),
        created_at=raw.get("createdAt"),
        payment_method=str(payment.get("method") or raw.get("paymentMethod") or "N/A"),
        payment_status=str(
            payment.get("status") or ("completed" if raw.get("isPaid") else "pending")
        ),
        total=_safe_money(pricing.get("total") or raw.get("totalPrice")),
        items=tuple(
            normalize_order_item(item) for item in raw_items if isinstance(item, dict)
        ),
        shipping_address=shipping if isinstance(shipping, dict) else {},
    )


def normalize_orders(payload: Any) -> list[OrderSummary]:
    """Accept ``{"orders": [...]}`` or a bare list; anything else is no orders."""
    if isinstance(payload, dict):
        payload = payload.get("orders")
    if not isinstance(payload, list):
        return []
    return [
        normalize_order(raw, index) for index, raw in enumerate(payload) if isinstance(raw, dict)
    ]
