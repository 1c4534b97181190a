"""Storefront client core: cart, pricing, checkout and order submission."""

__version__ = "1.0.0"
