"""Checkout domain types: shipping address, payment method and order draft."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from decimal import Decimal
from typing import Any

from storefront.core.constants import PAYMENT_CASH_ON_DELIVERY
from storefront.core.exceptions import ValidationException
from storefront.domain.cart import CartState
from storefront.domain.pricing import PriceBreakdown


class PaymentMethod:
    """Supported payment methods."""

    CASH_ON_DELIVERY = PAYMENT_CASH_ON_DELIVERY

    SUPPORTED = frozenset({CASH_ON_DELIVERY})

    @classmethod
    def normalize(cls, method: str | None) -> str | None:
        if not method:
            return None
        value = str(method).strip().lower()
        # legacy short code used by the web storefront
        return cls.CASH_ON_DELIVERY if value == "cod" else value

    @classmethod
    def is_supported(cls, method: str | None) -> bool:
        return cls.normalize(method) in cls.SUPPORTED


@dataclass(slots=True)
class ShippingAddress:
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    phone: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def prefilled(
        cls,
        user: dict[str, Any] | None,
        *,
        default_state: str,
        default_country: str,
    ) -> ShippingAddress:
        """Blank form with the user's name split into first/last and regional defaults."""
        name_parts = str((user or {}).get("name") or "").split()
        return cls(
            first_name=name_parts[0] if name_parts else "",
            last_name=" ".join(name_parts[1:]),
            state=default_state,
            country=default_country,
        )

    def missing_fields(self) -> list[str]:
        return [name for name in self.field_names() if not str(getattr(self, name) or "").strip()]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ValidationException(
                f"Shipping address is incomplete: {', '.join(missing)}",
                field=missing[0],
            )

    def to_dict(self) -> dict[str, str]:
        return {name: str(value).strip() for name, value in asdict(self).items()}


@dataclass(frozen=True, slots=True)
class OrderDraft:
    """Submission-ready snapshot of cart, address, payment choice and prices."""

    lines: CartState
    shipping_address: ShippingAddress
    payment_method: str
    prices: PriceBreakdown

    @property
    def items_price(self) -> Decimal:
        return self.prices.subtotal

    @property
    def tax_price(self) -> Decimal:
        return self.prices.tax

    @property
    def shipping_price(self) -> Decimal:
        return self.prices.shipping_fee

    @property
    def total_price(self) -> Decimal:
        return self.prices.total
