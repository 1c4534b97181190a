"""Use cases: account order list and single order detail."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from storefront.core.constants import ORDERS_LOAD_FAILED_MESSAGE
from storefront.core.exceptions import AuthenticationRequiredException, OrderApiException
from storefront.core.session import AuthSession
from storefront.domain.order_history import OrderSummary, normalize_order, normalize_orders

logger = logging.getLogger(__name__)


@dataclass
class OrderHistoryResult:
    ok: bool
    orders: list[OrderSummary] = field(default_factory=list)
    error_key: str | None = None
    message: str | None = None


async def fetch_my_orders(api: Any, session: AuthSession) -> OrderHistoryResult:
    try:
        token = session.require_token()
    except AuthenticationRequiredException as exc:
        return OrderHistoryResult(False, error_key="auth_required", message=exc.message)

    try:
        payload = await api.list_my_orders(token)
    except OrderApiException as exc:
        logger.warning("Loading orders failed: %s", exc.message)
        return OrderHistoryResult(False, error_key="api_error", message=ORDERS_LOAD_FAILED_MESSAGE)

    return OrderHistoryResult(True, orders=normalize_orders(payload))


async def fetch_order(api: Any, session: AuthSession, order_id: str) -> OrderHistoryResult:
    if not order_id:
        return OrderHistoryResult(False, error_key="not_found")

    try:
        raw = await api.get_order(order_id, session.token)
    except OrderApiException as exc:
        logger.warning("Loading order %s failed: %s", order_id, exc.message)
        error_key = "not_found" if exc.status == 404 else "api_error"
        return OrderHistoryResult(False, error_key=error_key, message=exc.message)

    return OrderHistoryResult(True, orders=[normalize_order(raw)])
