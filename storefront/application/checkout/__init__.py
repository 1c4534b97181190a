from storefront.application.checkout.controller import CheckoutController, ReviewSummary

__all__ = ["CheckoutController", "ReviewSummary"]
