"""Cart lines, cart actions and the pure cart transition function."""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Union


def to_money(value: Any) -> Decimal:
    """Parse a non-negative price coming from JSON or user code."""
    if isinstance(value, bool):
        raise ValueError("price must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"invalid price: {value!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"price must be >= 0, got {value!r}")
    return amount


def money_to_json(amount: Decimal) -> int | float:
    """Render an amount as a JSON number, keeping whole amounts integral."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def _to_quantity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"quantity must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"quantity must be an integer, got {value!r}")
    return int(value)


@dataclass(frozen=True, slots=True)
class CartLine:
    """Single product in the cart."""

    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    stock_limit: int | None = None
    image_ref: str | None = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def can_increase(self) -> bool:
        """Whether the UI may offer one more unit of this product."""
        return self.stock_limit is None or self.quantity < self.stock_limit

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "_id": self.product_id,
            "name": self.name,
            "price": money_to_json(self.unit_price),
            "qty": int(self.quantity),
        }
        if self.stock_limit is not None:
            data["stock"] = int(self.stock_limit)
        if self.image_ref is not None:
            data["image"] = self.image_ref
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartLine:
        """Strict parse of a persisted line; raises ValueError on bad data."""
        if not isinstance(data, dict):
            raise ValueError("cart line must be an object")
        product_id = data.get("_id")
        if not isinstance(product_id, str) or not product_id:
            raise ValueError("cart line has no product id")
        quantity = _to_quantity(data.get("qty"))
        if quantity <= 0:
            raise ValueError(f"cart line {product_id} has quantity {quantity}")
        stock = data.get("stock")
        image = data.get("image")
        return cls(
            product_id=product_id,
            name=str(data.get("name", "")),
            unit_price=to_money(data.get("price")),
            quantity=quantity,
            stock_limit=_to_quantity(stock) if stock is not None else None,
            image_ref=str(image) if image is not None else None,
        )


CartState = tuple[CartLine, ...]

EMPTY_CART: CartState = ()


@dataclass(frozen=True, slots=True)
class AddItem:
    line: CartLine


@dataclass(frozen=True, slots=True)
class RemoveItem:
    product_id: str


@dataclass(frozen=True, slots=True)
class SetQuantity:
    product_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class ClearCart:
    pass


@dataclass(frozen=True, slots=True)
class LoadCart:
    lines: CartState


CartAction = Union[AddItem, RemoveItem, SetQuantity, ClearCart, LoadCart]


def find_line(state: CartState, product_id: str) -> CartLine | None:
    for line in state:
        if line.product_id == product_id:
            return line
    return None


def reduce_cart(state: CartState, action: CartAction) -> CartState:
    """Return the cart that results from applying ``action`` to ``state``.

    Never mutates ``state``. Keeps lines unique by product id and drops any
    line whose quantity would fall to zero or below.
    """
    if isinstance(action, LoadCart):
        return tuple(action.lines)

    if isinstance(action, ClearCart):
        return EMPTY_CART

    if isinstance(action, RemoveItem):
        return tuple(line for line in state if line.product_id != action.product_id)

    if isinstance(action, SetQuantity):
        if action.quantity <= 0:
            return reduce_cart(state, RemoveItem(action.product_id))
        return tuple(
            replace(line, quantity=action.quantity) if line.product_id == action.product_id else line
            for line in state
        )

    if isinstance(action, AddItem):
        added = action.line
        if added.quantity <= 0:
            return state
        if find_line(state, added.product_id) is None:
            return state + (added,)
        # existing line keeps its own name/price/stock; only quantity grows
        return tuple(
            replace(line, quantity=line.quantity + added.quantity)
            if line.product_id == added.product_id
            else line
            for line in state
        )

    raise TypeError(f"Unknown cart action: {action!r}")


def items_count(state: CartState) -> int:
    return sum(line.quantity for line in state)
