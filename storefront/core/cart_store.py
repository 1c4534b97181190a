"""Cart state container persisted to durable storage after every change."""
from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Callable

from storefront.core.constants import STORAGE_KEY_CART
from storefront.core.exceptions import ValidationException
from storefront.core.storage import KeyValueStorage
from storefront.domain.cart import (
    EMPTY_CART,
    AddItem,
    CartAction,
    CartLine,
    CartState,
    ClearCart,
    LoadCart,
    RemoveItem,
    SetQuantity,
    find_line,
    items_count,
    reduce_cart,
    to_money,
)
from storefront.domain.pricing import PriceBreakdown, calc_price_breakdown

logger = logging.getLogger(__name__)

CartListener = Callable[[CartState], None]


class CartPersistence:
    """Reads and writes the ``cartItems`` entry as a JSON array of lines."""

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY_CART):
        self._storage = storage
        self._key = key

    def load(self) -> CartState:
        """Return the stored cart; anything malformed reads as an empty cart."""
        try:
            raw = self._storage.get(self._key)
        except Exception as exc:
            logger.warning("Cart storage read failed, starting empty: %s", exc)
            return EMPTY_CART
        if not raw:
            return EMPTY_CART
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("cart payload is not a list")
            lines = tuple(CartLine.from_dict(item) for item in data)
            ids = [line.product_id for line in lines]
            if len(ids) != len(set(ids)):
                raise ValueError("cart payload has duplicate product ids")
        except (ValueError, TypeError) as exc:
            logger.warning("Discarding malformed stored cart: %s", exc)
            return EMPTY_CART
        return lines

    def save(self, lines: CartState) -> None:
        payload = [line.to_dict() for line in lines]
        self._storage.set(self._key, json.dumps(payload, ensure_ascii=False))


class CartStore:
    """Single source of truth for cart contents.

    Every mutation runs through :func:`reduce_cart`, is persisted before the
    call returns, and is then broadcast to subscribers.
    """

    def __init__(self, persistence: CartPersistence):
        self._persistence = persistence
        self._state: CartState = EMPTY_CART
        self._listeners: list[CartListener] = []

    @property
    def lines(self) -> CartState:
        return self._state

    @property
    def is_empty(self) -> bool:
        return not self._state

    @property
    def items_count(self) -> int:
        return items_count(self._state)

    def price_breakdown(self) -> PriceBreakdown:
        return calc_price_breakdown(self._state)

    def get_line(self, product_id: str) -> CartLine | None:
        return find_line(self._state, product_id)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: CartAction) -> CartState:
        new_state = reduce_cart(self._state, action)
        changed = new_state != self._state
        self._state = new_state
        self._persistence.save(new_state)
        if changed:
            for listener in list(self._listeners):
                listener(new_state)
        return new_state

    def load(self) -> CartState:
        return self.dispatch(LoadCart(self._persistence.load()))

    def add(self, product: dict[str, Any] | CartLine, quantity: int = 1) -> CartState:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationException(
                f"Quantity must be a positive integer, got {quantity!r}", field="quantity"
            )
        line = self._line_from_product(product, quantity)
        return self.dispatch(AddItem(line))

    def remove(self, product_id: str) -> CartState:
        return self.dispatch(RemoveItem(product_id))

    def set_quantity(self, product_id: str, quantity: int) -> CartState:
        return self.dispatch(SetQuantity(product_id, int(quantity)))

    def clear(self) -> CartState:
        return self.dispatch(ClearCart())

    @staticmethod
    def _line_from_product(product: dict[str, Any] | CartLine, quantity: int) -> CartLine:
        if isinstance(product, CartLine):
            return replace(product, quantity=quantity)
        product_id = product.get("_id") or product.get("product_id")
        if not product_id:
            raise ValidationException("Product has no id", field="product_id")
        stock = product.get("stock")
        try:
            unit_price = to_money(product.get("price"))
            stock_limit = int(stock) if stock is not None else None
        except (TypeError, ValueError) as exc:
            raise ValidationException(f"Invalid product {product_id}: {exc}") from exc
        image = product.get("image")
        return CartLine(
            product_id=str(product_id),
            name=str(product.get("name", "")),
            unit_price=unit_price,
            quantity=quantity,
            stock_limit=stock_limit,
            image_ref=str(image) if image is not None else None,
        )
