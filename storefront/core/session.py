"""Read-only view of the signed-in user and bearer credential."""
from __future__ import annotations

import json
import logging
from typing import Any

from storefront.core.constants import STORAGE_KEY_TOKEN, STORAGE_KEY_USER
from storefront.core.exceptions import AuthenticationRequiredException
from storefront.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class AuthSession:
    """Consumes the ``token`` and ``user`` entries written by the sign-in flow."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    @property
    def token(self) -> str | None:
        token = self._storage.get(STORAGE_KEY_TOKEN)
        if token is None:
            return None
        token = token.strip()
        return token or None

    @property
    def user(self) -> dict[str, Any] | None:
        raw = self._storage.get(STORAGE_KEY_USER)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored user profile is not valid JSON; treating as signed out")
            return None
        return data if isinstance(data, dict) else None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def require_token(self) -> str:
        """Bearer credential for an authenticated call; raises when signed out."""
        token = self.token
        if token is None:
            raise AuthenticationRequiredException()
        return token
