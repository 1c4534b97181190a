"""HTTP client for the remote order API (aiohttp) and its wire models."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from storefront.core.config import Settings
from storefront.core.constants import MY_ORDERS_PATH, ORDER_FAILED_MESSAGE, ORDERS_PATH
from storefront.core.exceptions import OrderApiException
from storefront.domain.cart import money_to_json
from storefront.domain.checkout import OrderDraft

logger = logging.getLogger(__name__)


# ==================== MODELS ====================


class OrderItemPayload(BaseModel):
    name: str
    qty: int = Field(..., gt=0)
    price: int | float = Field(..., ge=0)
    product: str
    image: str = ""


class ShippingAddressPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    address: str
    city: str
    state: str
    postal_code: str = Field(..., alias="postalCode")
    country: str
    phone: str


class OrderCreatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_items: list[OrderItemPayload] = Field(..., alias="orderItems", min_length=1)
    shipping_address: ShippingAddressPayload = Field(..., alias="shippingAddress")
    payment_method: str = Field(..., alias="paymentMethod")
    items_price: int | float = Field(..., alias="itemsPrice", ge=0)
    tax_price: int | float = Field(..., alias="taxPrice", ge=0)
    shipping_price: int | float = Field(..., alias="shippingPrice", ge=0)
    total_price: int | float = Field(..., alias="totalPrice", ge=0)

    @classmethod
    def from_draft(cls, draft: OrderDraft) -> OrderCreatePayload:
        return cls(
            order_items=[
                OrderItemPayload(
                    name=line.name,
                    qty=line.quantity,
                    price=money_to_json(line.unit_price),
                    product=line.product_id,
                    image=line.image_ref or "",
                )
                for line in draft.lines
            ],
            shipping_address=ShippingAddressPayload(**draft.shipping_address.to_dict()),
            payment_method=draft.payment_method,
            items_price=money_to_json(draft.items_price),
            tax_price=money_to_json(draft.tax_price),
            shipping_price=money_to_json(draft.shipping_price),
            total_price=money_to_json(draft.total_price),
        )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class OrderCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    order_number: str | None = Field(None, alias="orderNumber")
    message: str | None = None

    @field_validator("order_number", mode="before")
    @classmethod
    def coerce_order_number(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)


# ==================== CLIENT ====================


class OrderApiClient:
    """Thin aiohttp wrapper; every transport problem surfaces as OrderApiException."""

    def __init__(self, base_url: str, timeout: float = 15.0):
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> OrderApiClient:
        return cls(settings.api_url, timeout=settings.request_timeout)

    @staticmethod
    def _headers(token: str | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        token: str | None,
        payload: dict[str, Any] | None = None,
    ) -> tuple[int, Any]:
        url = f"{self._base_url}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.request(
                    method, url, json=payload, headers=self._headers(token)
                ) as resp:
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError:
                        data = None
                    return resp.status, data
        except asyncio.TimeoutError as exc:
            logger.warning("Order API timeout: %s %s", method, url)
            raise OrderApiException("Request timed out") from exc
        except aiohttp.ClientError as exc:
            logger.warning("Order API request failed: %s %s: %s", method, url, exc)
            raise OrderApiException(f"Network error: {exc}") from exc

    async def create_order(self, payload: OrderCreatePayload, token: str) -> OrderCreateResponse:
        status, data = await self._request_json(
            "POST", ORDERS_PATH, token=token, payload=payload.to_json()
        )
        if not isinstance(data, dict):
            raise OrderApiException(f"Unexpected response from order API (HTTP {status})", status)
        try:
            response = OrderCreateResponse.model_validate(data)
        except ValidationError as exc:
            raise OrderApiException(ORDER_FAILED_MESSAGE, status) from exc
        if response.success and status >= 400:
            # an HTTP error status is a failure whatever the body says
            return OrderCreateResponse(success=False, message=response.message)
        return response

    async def list_my_orders(self, token: str) -> Any:
        status, data = await self._request_json("GET", MY_ORDERS_PATH, token=token)
        if status >= 400:
            raise OrderApiException(f"Order API returned HTTP {status}", status)
        return data

    async def get_order(self, order_id: str, token: str | None) -> Any:
        status, data = await self._request_json("GET", f"{ORDERS_PATH}/{order_id}", token=token)
        if status >= 400 or not isinstance(data, dict):
            raise OrderApiException(f"Order API returned HTTP {status}", status)
        return data
