"""Shared pytest fixtures for the storefront core."""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from storefront.application.checkout.controller import CheckoutController
from storefront.application.orders.submit_order import OrderSubmissionGateway
from storefront.core.cart_store import CartPersistence, CartStore
from storefront.core.constants import STORAGE_KEY_TOKEN, STORAGE_KEY_USER
from storefront.core.session import AuthSession
from storefront.core.storage import MemoryKeyValueStorage
from storefront.integrations.order_api import OrderCreateResponse


@dataclass
class FakeOrderApi:
    response: OrderCreateResponse = field(
        default_factory=lambda: OrderCreateResponse(success=True, order_number="ORD-1001")
    )
    error: Exception | None = None
    gate: asyncio.Event | None = None
    calls: list[tuple[Any, str]] = field(default_factory=list)
    orders_payload: Any = None
    order_payload: Any = None

    async def create_order(self, payload, token: str) -> OrderCreateResponse:
        self.calls.append((payload, token))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response

    async def list_my_orders(self, token: str) -> Any:
        self.calls.append(("list", token))
        if self.error is not None:
            raise self.error
        return self.orders_payload

    async def get_order(self, order_id: str, token: str | None) -> Any:
        self.calls.append((order_id, token))
        if self.error is not None:
            raise self.error
        return self.order_payload


@pytest.fixture
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage("test")


@pytest.fixture
def signed_in(storage: MemoryKeyValueStorage) -> MemoryKeyValueStorage:
    storage.set(STORAGE_KEY_TOKEN, "secret-token")
    storage.set(
        STORAGE_KEY_USER,
        json.dumps({"name": "Asha Rani Patel", "email": "asha@example.com"}),
    )
    return storage


@pytest.fixture
def session(storage: MemoryKeyValueStorage) -> AuthSession:
    return AuthSession(storage)


@pytest.fixture
def cart(storage: MemoryKeyValueStorage) -> CartStore:
    store = CartStore(CartPersistence(storage))
    store.load()
    return store


@pytest.fixture
def controller(cart: CartStore, session: AuthSession) -> CheckoutController:
    return CheckoutController(cart, session)


@pytest.fixture
def api() -> FakeOrderApi:
    return FakeOrderApi()


@pytest.fixture
def gateway(api, cart, controller, session) -> OrderSubmissionGateway:
    return OrderSubmissionGateway(api, cart, controller, session)

