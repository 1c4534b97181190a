"""Custom exceptions for the storefront client."""
from __future__ import annotations


class StorefrontException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(StorefrontException):
    """Local input validation errors (never reach the network)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class StorageException(StorefrontException):
    """Durable storage backend errors."""

    pass


class ConfigurationException(StorefrontException):
    """Configuration errors."""

    pass


class CheckoutAbortedException(StorefrontException):
    """Checkout cannot continue because the cart is empty."""

    def __init__(self, message: str = "Cart is empty") -> None:
        super().__init__(message)


class AuthenticationRequiredException(StorefrontException):
    """No bearer credential is available for an authenticated call."""

    def __init__(self, message: str = "Please login first") -> None:
        super().__init__(message)


class OrderApiException(StorefrontException):
    """Order API transport or response errors."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
