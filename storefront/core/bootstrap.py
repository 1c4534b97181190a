"""Application root: wires storage, session, cart, checkout and order API."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from storefront.application.checkout.controller import CheckoutController
from storefront.application.orders.submit_order import OrderSubmissionGateway
from storefront.core.cart_store import CartPersistence, CartStore
from storefront.core.config import Settings, load_settings
from storefront.core.session import AuthSession
from storefront.core.storage import KeyValueStorage, build_storage
from storefront.integrations.order_api import OrderApiClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Storefront:
    """Owns the single cart store and hands it to every collaborator."""

    settings: Settings
    storage: KeyValueStorage
    session: AuthSession
    cart: CartStore
    checkout: CheckoutController
    api: OrderApiClient
    orders: OrderSubmissionGateway


def build_storefront(
    settings: Settings | None = None,
    *,
    storage: KeyValueStorage | None = None,
    api: OrderApiClient | None = None,
) -> Storefront:
    """Create the runtime components and rehydrate the persisted cart."""
    settings = settings or load_settings()
    storage = storage if storage is not None else build_storage(settings)
    session = AuthSession(storage)

    cart = CartStore(CartPersistence(storage))
    cart.load()
    logger.info("Cart loaded with %s item(s)", cart.items_count)

    checkout = CheckoutController(
        cart,
        session,
        default_state=settings.default_state,
        default_country=settings.default_country,
    )
    api = api or OrderApiClient.from_settings(settings)
    orders = OrderSubmissionGateway(api, cart, checkout, session)

    return Storefront(
        settings=settings,
        storage=storage,
        session=session,
        cart=cart,
        checkout=checkout,
        api=api,
        orders=orders,
    )
