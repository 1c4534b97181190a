"""Environment-driven configuration objects for the storefront client."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from storefront.core.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SHIPPING_COUNTRY,
    DEFAULT_SHIPPING_STATE,
)
from storefront.core.exceptions import ConfigurationException


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_float(key: str, default: float) -> float:
    raw = _blank_to_none(os.getenv(key))
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationException(f"{key} must be > 0")
    return value


@dataclass(slots=True)
class Settings:
    api_url: str
    redis_url: str | None
    storage_namespace: str
    request_timeout: float
    default_state: str
    default_country: str


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    api_url = _blank_to_none(os.getenv("STOREFRONT_API_URL")) or "http://localhost:5000"

    return Settings(
        api_url=api_url.rstrip("/"),
        redis_url=_blank_to_none(os.getenv("REDIS_URL")),
        storage_namespace=_blank_to_none(os.getenv("STOREFRONT_STORAGE_NAMESPACE")) or "storefront",
        request_timeout=_get_float("STOREFRONT_REQUEST_TIMEOUT", float(DEFAULT_REQUEST_TIMEOUT)),
        default_state=_blank_to_none(os.getenv("STOREFRONT_DEFAULT_STATE")) or DEFAULT_SHIPPING_STATE,
        default_country=(
            _blank_to_none(os.getenv("STOREFRONT_DEFAULT_COUNTRY")) or DEFAULT_SHIPPING_COUNTRY
        ),
    )
