"""Checkout flow controller: Shipping -> Payment -> Review -> Submitted."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from storefront.core.cart_store import CartStore
from storefront.core.constants import DEFAULT_SHIPPING_COUNTRY, DEFAULT_SHIPPING_STATE
from storefront.core.exceptions import CheckoutAbortedException, ValidationException
from storefront.core.session import AuthSession
from storefront.domain.cart import CartState
from storefront.domain.checkout import OrderDraft, PaymentMethod, ShippingAddress
from storefront.domain.checkout_fsm import CheckoutStep, validate_checkout_transition
from storefront.domain.pricing import PriceBreakdown, calc_price_breakdown

logger = logging.getLogger(__name__)

REDIRECT_CART = "cart"
REDIRECT_LOGIN = "login"
REDIRECT_ORDERS = "orders"

ACTIVE_STEPS = frozenset({CheckoutStep.SHIPPING, CheckoutStep.PAYMENT, CheckoutStep.REVIEW})


@dataclass(frozen=True, slots=True)
class ReviewSummary:
    lines: CartState
    shipping_address: ShippingAddress
    payment_method: str | None
    prices: PriceBreakdown


class CheckoutController:
    """Drives one checkout attempt over the shared cart store.

    ``step`` is ``None`` while no checkout is active (before ``start()`` or
    after an abort). The controller listens to the cart and aborts as soon as
    the cart empties under an active checkout.
    """

    def __init__(
        self,
        cart_store: CartStore,
        session: AuthSession,
        *,
        default_state: str = DEFAULT_SHIPPING_STATE,
        default_country: str = DEFAULT_SHIPPING_COUNTRY,
    ):
        self._cart = cart_store
        self._session = session
        self._default_state = default_state
        self._default_country = default_country

        self.step: str | None = None
        self.shipping_address = ShippingAddress()
        self.payment_method: str | None = None
        self.submitting = False
        self.error: str | None = None
        self.redirect: str | None = None
        self.last_order_number: str | None = None

        self._unsubscribe = cart_store.subscribe(self._on_cart_changed)

    # ------------------------------------------------------------------ state

    @property
    def is_active(self) -> bool:
        return self.step in ACTIVE_STEPS

    @property
    def can_submit(self) -> bool:
        return (
            self.step == CheckoutStep.REVIEW
            and not self.submitting
            and not self._cart.is_empty
        )

    def _reset(self) -> None:
        self.step = None
        self.shipping_address = ShippingAddress()
        self.payment_method = None
        self.submitting = False
        self.error = None

    def close(self) -> None:
        """Stop listening to the cart store."""
        self._unsubscribe()

    def _on_cart_changed(self, lines: CartState) -> None:
        if lines or not self.is_active:
            return
        logger.info("Cart emptied during checkout at step %s; aborting", self.step)
        self.abort()

    def abort(self) -> None:
        self._reset()
        self.redirect = REDIRECT_CART

    def redirect_to(self, target: str) -> None:
        self.redirect = target

    def start(self) -> None:
        """Begin (or restart) checkout with a freshly prefilled shipping form."""
        self._reset()
        self.redirect = None
        if self._cart.is_empty:
            self.redirect = REDIRECT_CART
            raise CheckoutAbortedException()
        self.shipping_address = ShippingAddress.prefilled(
            self._session.user,
            default_state=self._default_state,
            default_country=self._default_country,
        )
        self.step = CheckoutStep.SHIPPING

    # ------------------------------------------------------------ transitions

    def _require_active(self) -> None:
        if not self.is_active or self._cart.is_empty:
            if self.is_active:
                self.abort()
            raise CheckoutAbortedException()

    def go_to(self, target: str) -> None:
        self._require_active()
        if target == CheckoutStep.SUBMITTED:
            # entered only through complete_submission() after the server accepts the order
            raise ValidationException("Place the order to finish checkout", field="step")
        if self.submitting:
            raise ValidationException("Order submission is in progress")
        result = validate_checkout_transition(
            current_step=self.step,
            target_step=target,
            shipping_complete=not self.shipping_address.missing_fields(),
            payment_selected=PaymentMethod.is_supported(self.payment_method),
            cart_empty=self._cart.is_empty,
        )
        if not result.allowed:
            raise ValidationException(result.reason or "Transition is not allowed", field="step")
        self.step = target

    def update_shipping(self, **changes: str) -> ShippingAddress:
        self._require_active()
        if self.step != CheckoutStep.SHIPPING:
            raise ValidationException("Shipping address can only be edited on the shipping step")
        allowed = ShippingAddress.field_names()
        for name in changes:
            if name not in allowed:
                raise ValidationException(f"Unknown shipping field: {name}", field=name)
        for name, value in changes.items():
            setattr(self.shipping_address, name, "" if value is None else str(value))
        return self.shipping_address

    def submit_shipping(self) -> None:
        self._require_active()
        self.shipping_address.validate()
        self.go_to(CheckoutStep.PAYMENT)

    def select_payment(self, method: str) -> None:
        self._require_active()
        if self.step != CheckoutStep.PAYMENT:
            raise ValidationException("Payment method can only be chosen on the payment step")
        normalized = PaymentMethod.normalize(method)
        if normalized not in PaymentMethod.SUPPORTED:
            raise ValidationException(
                f"Unsupported payment method: {method}", field="payment_method"
            )
        self.payment_method = normalized

    def submit_payment(self) -> None:
        self._require_active()
        if not PaymentMethod.is_supported(self.payment_method):
            raise ValidationException("Select a payment method", field="payment_method")
        self.go_to(CheckoutStep.REVIEW)

    def back(self) -> None:
        if self.step == CheckoutStep.PAYMENT:
            self.go_to(CheckoutStep.SHIPPING)
        elif self.step == CheckoutStep.REVIEW:
            self.go_to(CheckoutStep.PAYMENT)
        else:
            raise ValidationException(f"Cannot go back from step {self.step}", field="step")

    # ----------------------------------------------------------------- review

    def summary(self) -> ReviewSummary:
        lines = self._cart.lines
        return ReviewSummary(
            lines=lines,
            shipping_address=self.shipping_address,
            payment_method=self.payment_method,
            prices=calc_price_breakdown(lines),
        )

    def build_draft(self) -> OrderDraft:
        self._require_active()
        if self.step != CheckoutStep.REVIEW:
            raise ValidationException(
                "Order can only be placed from the review step", field="step"
            )
        lines = self._cart.lines
        return OrderDraft(
            lines=lines,
            shipping_address=ShippingAddress(**self.shipping_address.to_dict()),
            payment_method=str(self.payment_method),
            prices=calc_price_breakdown(lines),
        )

    # ------------------------------------------------------------- submission

    def begin_submission(self) -> OrderDraft:
        """Lock the review step and hand out the draft to send."""
        if self.submitting:
            raise ValidationException("Order submission is already in progress")
        draft = self.build_draft()
        self.submitting = True
        self.error = None
        return draft

    def complete_submission(self, order_number: str | None) -> None:
        self._reset()
        self.step = CheckoutStep.SUBMITTED
        self.last_order_number = order_number
        self.redirect = REDIRECT_ORDERS

    def fail_submission(self, message: str) -> None:
        self.submitting = False
        self.error = message

    def dismiss_error(self) -> None:
        self.error = None
