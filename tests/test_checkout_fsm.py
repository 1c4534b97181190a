from __future__ import annotations

from storefront.domain.checkout_fsm import CheckoutStep, validate_checkout_transition


def _validate(
    current: str,
    target: str,
    *,
    shipping_complete: bool = True,
    payment_selected: bool = True,
    cart_empty: bool = False,
):
    return validate_checkout_transition(
        current_step=current,
        target_step=target,
        shipping_complete=shipping_complete,
        payment_selected=payment_selected,
        cart_empty=cart_empty,
    )


def test_happy_path_transitions_allowed() -> None:
    assert _validate(CheckoutStep.SHIPPING, CheckoutStep.PAYMENT).allowed
    assert _validate(CheckoutStep.PAYMENT, CheckoutStep.REVIEW).allowed
    assert _validate(CheckoutStep.REVIEW, CheckoutStep.SUBMITTED).allowed


def test_skipping_forward_is_blocked() -> None:
    assert not _validate(CheckoutStep.SHIPPING, CheckoutStep.REVIEW).allowed
    assert not _validate(CheckoutStep.SHIPPING, CheckoutStep.SUBMITTED).allowed
    assert not _validate(CheckoutStep.PAYMENT, CheckoutStep.SUBMITTED).allowed


def test_backward_transitions_ignore_field_guards() -> None:
    result = _validate(
        CheckoutStep.REVIEW,
        CheckoutStep.SHIPPING,
        shipping_complete=False,
        payment_selected=False,
    )
    assert result.allowed
    assert _validate(CheckoutStep.PAYMENT, CheckoutStep.SHIPPING, shipping_complete=False).allowed


def test_incomplete_shipping_blocks_payment() -> None:
    result = _validate(CheckoutStep.SHIPPING, CheckoutStep.PAYMENT, shipping_complete=False)
    assert not result.allowed
    assert "Shipping" in result.reason


def test_missing_payment_blocks_review() -> None:
    assert not _validate(CheckoutStep.PAYMENT, CheckoutStep.REVIEW, payment_selected=False).allowed


def test_empty_cart_blocks_forward_moves() -> None:
    assert not _validate(CheckoutStep.REVIEW, CheckoutStep.SUBMITTED, cart_empty=True).allowed


def test_submitted_is_terminal() -> None:
    assert not _validate(CheckoutStep.SUBMITTED, CheckoutStep.REVIEW).allowed


def test_unknown_step_is_rejected() -> None:
    assert not _validate(CheckoutStep.SHIPPING, "confirmation").allowed


def test_step_numbers_follow_flow_order() -> None:
    assert [CheckoutStep.number(step) for step in CheckoutStep.ORDER] == [1, 2, 3, 4]
