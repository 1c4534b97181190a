"""Use case: submit the reviewed checkout as an order, at most one at a time."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from storefront.application.checkout.controller import REDIRECT_LOGIN, CheckoutController
from storefront.core.cart_store import CartStore
from storefront.core.constants import ORDER_FAILED_MESSAGE
from storefront.core.exceptions import (
    AuthenticationRequiredException,
    CheckoutAbortedException,
    OrderApiException,
    ValidationException,
)
from storefront.core.session import AuthSession
from storefront.integrations.order_api import OrderCreatePayload

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    ok: bool
    order_number: str | None = None
    error_key: str | None = None
    message: str | None = None


class OrderSubmissionGateway:
    """Posts the order draft and applies the outcome to cart and controller.

    Only one request may be outstanding; a second ``submit()`` while one is
    pending is rejected locally and never reaches the API.
    """

    def __init__(
        self,
        api: Any,
        cart_store: CartStore,
        controller: CheckoutController,
        session: AuthSession,
    ):
        self._api = api
        self._cart = cart_store
        self._controller = controller
        self._session = session
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(self) -> SubmissionResult:
        if self._in_flight or self._controller.submitting:
            logger.info("Ignoring duplicate order submission while one is pending")
            return SubmissionResult(False, error_key="in_flight")

        try:
            token = self._session.require_token()
        except AuthenticationRequiredException as exc:
            self._controller.redirect_to(REDIRECT_LOGIN)
            return SubmissionResult(False, error_key="auth_required", message=exc.message)

        try:
            draft = self._controller.begin_submission()
        except CheckoutAbortedException as exc:
            return SubmissionResult(False, error_key="cart_empty", message=exc.message)
        except ValidationException as exc:
            return SubmissionResult(False, error_key="validation", message=exc.message)

        try:
            payload = OrderCreatePayload.from_draft(draft)
        except PydanticValidationError as exc:
            logger.warning("Order draft failed payload validation: %s", exc)
            self._controller.fail_submission(ORDER_FAILED_MESSAGE)
            return SubmissionResult(False, error_key="validation", message=ORDER_FAILED_MESSAGE)

        self._in_flight = True
        try:
            response = await self._api.create_order(payload, token)
        except OrderApiException as exc:
            logger.warning("Order submission failed: %s", exc.message)
            self._controller.fail_submission(exc.message)
            return SubmissionResult(False, error_key="api_error", message=exc.message)
        except Exception:
            logger.exception("Unexpected error while submitting order")
            self._controller.fail_submission(ORDER_FAILED_MESSAGE)
            return SubmissionResult(False, error_key="api_error", message=ORDER_FAILED_MESSAGE)
        finally:
            self._in_flight = False

        if not response.success:
            message = response.message or ORDER_FAILED_MESSAGE
            logger.warning("Order rejected by server: %s", message)
            self._controller.fail_submission(message)
            return SubmissionResult(False, error_key="rejected", message=message)

        logger.info("Order placed: %s", response.order_number)
        # complete before clearing: an emptied cart under an active checkout aborts it
        self._controller.complete_submission(response.order_number)
        self._cart.clear()
        return SubmissionResult(True, order_number=response.order_number)
