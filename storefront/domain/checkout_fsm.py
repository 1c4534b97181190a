"""Checkout step transition rules (single source of truth)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


class CheckoutStep:
    """Checkout steps in the order the customer walks through them."""

    SHIPPING = "shipping"
    PAYMENT = "payment"
    REVIEW = "review"
    SUBMITTED = "submitted"

    ORDER = (SHIPPING, PAYMENT, REVIEW, SUBMITTED)

    @classmethod
    def number(cls, step: str) -> int:
        """1-based position used by progress indicators."""
        return cls.ORDER.index(step) + 1


ALLOWED_TRANSITIONS: Mapping[str, frozenset[str]] = {
    CheckoutStep.SHIPPING: frozenset({CheckoutStep.PAYMENT}),
    CheckoutStep.PAYMENT: frozenset({CheckoutStep.SHIPPING, CheckoutStep.REVIEW}),
    CheckoutStep.REVIEW: frozenset(
        {
            CheckoutStep.SHIPPING,
            CheckoutStep.PAYMENT,
            CheckoutStep.SUBMITTED,
        }
    ),
    CheckoutStep.SUBMITTED: frozenset(),
}

TERMINAL_STEPS = frozenset({CheckoutStep.SUBMITTED})


@dataclass(frozen=True, slots=True)
class TransitionValidationResult:
    allowed: bool
    reason: str | None = None


def validate_checkout_transition(
    *,
    current_step: str,
    target_step: str,
    shipping_complete: bool,
    payment_selected: bool,
    cart_empty: bool,
) -> TransitionValidationResult:
    """Validate cart/field guards and the step transition matrix."""
    if target_step not in ALLOWED_TRANSITIONS:
        return TransitionValidationResult(False, f"Unsupported checkout step: {target_step}")

    if current_step not in ALLOWED_TRANSITIONS:
        return TransitionValidationResult(False, f"Unsupported current step: {current_step}")

    if current_step == target_step:
        return TransitionValidationResult(True)

    if current_step in TERMINAL_STEPS:
        return TransitionValidationResult(False, "Checkout is already submitted.")

    if target_step not in ALLOWED_TRANSITIONS[current_step]:
        return TransitionValidationResult(
            False,
            f"Transition '{current_step} -> {target_step}' is not allowed.",
        )

    is_forward = CheckoutStep.ORDER.index(target_step) > CheckoutStep.ORDER.index(current_step)
    if not is_forward:
        return TransitionValidationResult(True)

    if cart_empty:
        return TransitionValidationResult(False, "Cart is empty.")

    if not shipping_complete:
        return TransitionValidationResult(False, "Shipping address is incomplete.")

    if target_step in (CheckoutStep.REVIEW, CheckoutStep.SUBMITTED) and not payment_selected:
        return TransitionValidationResult(False, "Select a payment method.")

    return TransitionValidationResult(True)
