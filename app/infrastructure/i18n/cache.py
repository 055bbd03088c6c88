"""Storage backends for the translation caches.

The text localizer stores the application language set and one message
table per language through a TranslationCache. Values are string-to-string
mappings that are written once and never modified afterwards.
"""

import json
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from redis import ConnectionPool, Redis  # type: ignore

from core.logging import get_module_logger

logger = get_module_logger()


class TranslationCache(ABC):
    """Abstract key-value store for published translation mappings."""

    @abstractmethod
    def get(self, key: str) -> Optional[Mapping[str, str]]:
        """Get the mapping stored under key.

        Returns:
            Read-only mapping, or None if nothing is published under key.
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether a mapping is published under key."""
        pass

    @abstractmethod
    def set(self, key: str, value: Mapping[str, str]) -> None:
        """Publish a mapping under key, replacing any previous one."""
        pass

    @abstractmethod
    def delete_scope(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix.

        Returns:
            Number of entries removed.
        """
        pass


class InMemoryTranslationCache(TranslationCache):
    """Process-local cache.

    Published mappings are wrapped in MappingProxyType so readers can never
    modify them. Scope deletion swaps in a new dict instead of deleting
    entries from the one concurrent readers may be using.
    """

    def __init__(self):
        self._entries: Dict[str, Mapping[str, str]] = {}

    def get(self, key: str) -> Optional[Mapping[str, str]]:
        return self._entries.get(key)

    def exists(self, key: str) -> bool:
        return key in self._entries

    def set(self, key: str, value: Mapping[str, str]) -> None:
        self._entries[key] = MappingProxyType(dict(value))

    def delete_scope(self, prefix: str) -> int:
        entries = self._entries
        kept = {k: v for k, v in entries.items() if not k.startswith(prefix)}
        self._entries = kept
        return len(entries) - len(kept)

    def __len__(self) -> int:
        return len(self._entries)


class RedisTranslationCache(TranslationCache):
    """Redis-backed cache shared by every process of a deployment.

    Mappings are stored as JSON documents. The last decoded document of each
    key is kept so an unchanged value comes back as the same mapping object.
    """

    def __init__(self, client: Redis):
        self._client = client
        self._decoded: Dict[str, Tuple[str, Mapping[str, str]]] = {}

    def get(self, key: str) -> Optional[Mapping[str, str]]:
        raw = self._client.get(key)
        if raw is None:
            return None
        decoded = self._decoded.get(key)
        if decoded is not None and decoded[0] == raw:
            return decoded[1]
        value = MappingProxyType(json.loads(raw))
        self._decoded[key] = (raw, value)
        return value

    def exists(self, key: str) -> bool:
        return bool(self._client.exists(key))

    def set(self, key: str, value: Mapping[str, str]) -> None:
        self._client.set(key, json.dumps(dict(value), ensure_ascii=False))

    def delete_scope(self, prefix: str) -> int:
        self._decoded = {
            k: v for k, v in self._decoded.items() if not k.startswith(prefix)
        }
        keys = list(self._client.scan_iter(match=f"{prefix}*"))
        if not keys:
            return 0
        return int(self._client.delete(*keys))


def create_redis_client(
    host: str,
    port: int = 6379,
    db: int = 0,
    socket_timeout: int = 5,
) -> Redis:
    """Create a pooled Redis client for the translation cache."""
    pool = ConnectionPool(
        host=host,
        port=port,
        db=db,
        decode_responses=True,
        max_connections=10,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
        retry_on_timeout=True,
        health_check_interval=30,
    )
    logger.info("redis_connection_pool_created", host=host, port=port, db=db)
    return Redis(connection_pool=pool)
