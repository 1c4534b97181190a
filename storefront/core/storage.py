"""Durable key-value storage backed by Redis with an in-memory fallback."""
from __future__ import annotations

import logging
from typing import Any, Protocol

import redis

from storefront.core.config import Settings
from storefront.core.exceptions import StorageException

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Minimal string key-value contract shared by cart, session and tests."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStorage:
    """Process-local storage; survives only as long as the process."""

    def __init__(self, namespace: str = "storefront"):
        self._namespace = namespace
        self._data: dict[str, str] = {}

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        return self._data.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self._data[self._key(key)] = value

    def delete(self, key: str) -> None:
        self._data.pop(self._key(key), None)


class RedisKeyValueStorage:
    """Redis-backed storage that degrades to memory mode on connection errors.

    Writes are synchronous: once ``set`` returns, any other reader of the same
    namespace observes the new value.
    """

    def __init__(self, redis_url: str, namespace: str = "storefront"):
        self._redis_url = redis_url
        self._namespace = namespace
        self._memory = MemoryKeyValueStorage(namespace)
        self._client: Any = self._init_client()

    @property
    def is_fallback(self) -> bool:
        return self._client is None

    def _init_client(self) -> Any:
        try:
            client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
            logger.info("Redis storage enabled (namespace=%s)", self._namespace)
            return client
        except Exception as exc:
            logger.warning("Redis storage init failed, fallback to in-memory: %s", exc)
            return None

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Redis storage fallback to memory mode: %s", reason)
        self._client = None

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def _execute(self, command: str, *args: Any) -> Any:
        try:
            return getattr(self._client, command)(*args)
        except redis.RedisError as exc:
            raise StorageException(f"Redis {command} failed: {exc}") from exc

    def get(self, key: str) -> str | None:
        if self._client:
            try:
                return self._execute("get", self._key(key))
            except StorageException as exc:
                self._switch_to_memory_fallback(exc)
        return self._memory.get(key)

    def set(self, key: str, value: str) -> None:
        if self._client:
            try:
                self._execute("set", self._key(key), value)
                return
            except StorageException as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.set(key, value)

    def delete(self, key: str) -> None:
        if self._client:
            try:
                self._execute("delete", self._key(key))
                return
            except StorageException as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.delete(key)


def build_storage(settings: Settings) -> KeyValueStorage:
    """Pick Redis when REDIS_URL is configured, otherwise in-memory storage."""
    if not settings.redis_url:
        logger.warning("REDIS_URL is not set; storage uses in-memory fallback")
        return MemoryKeyValueStorage(settings.storage_namespace)
    return RedisKeyValueStorage(settings.redis_url, settings.storage_namespace)
