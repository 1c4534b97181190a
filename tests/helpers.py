"""Checkout helpers shared by test modules."""
from __future__ import annotations

from storefront.application.checkout.controller import CheckoutController

PLANT = {"_id": "p1", "name": "Monstera", "price": 300, "stock": 5, "image": "monstera.jpg"}
FERN = {"_id": "p2", "name": "Boston Fern", "price": 150}


def fill_shipping(controller: CheckoutController) -> None:
    controller.update_shipping(
        first_name="Asha",
        last_name="Patel",
        address="12 Garden Road",
        city="Surat",
        state="Gujarat",
        postal_code="395001",
        country="India",
        phone="9876543210",
    )


def walk_to_review(controller: CheckoutController) -> None:
    controller.start()
    fill_shipping(controller)
    controller.submit_shipping()
    controller.select_payment("cash_on_delivery")
    controller.submit_payment()
