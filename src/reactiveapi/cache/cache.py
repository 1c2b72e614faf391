"""Disk-based response cache for GET requests.

Uses :mod:`diskcache` to persist :class:`~reactiveapi.models.CacheEntry`
values on the filesystem with a time-to-live.  The execution pipeline only
ever *writes* entries (after asking a
:class:`~reactiveapi.cache.policy.CachePolicy`); reads happen inside
:class:`~reactiveapi.client.transport.HttpxTransport`, which serves a hit
for an identical GET without touching the network.

``diskcache`` is thread- and process-safe, so one store can be shared by
any number of concurrent calls.

Cache keys are SHA-256 hashes of ``METHOD|URL``.  The URL already carries
the query string, so identical requests always resolve to the same entry.

See Also:
    :class:`~reactiveapi.models.CacheConfig` -- controls ``enabled`` and
    the default ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Optional

import diskcache

from reactiveapi.models import CacheConfig, CacheEntry, HTTPMethod, Request


def make_cache_key(method: HTTPMethod | str, url: str) -> str:
    """Return the cache key for a request identified by *method* and *url*."""
    verb = method.value if isinstance(method, HTTPMethod) else method.upper()
    raw = f"{verb}|{url}"
    return hashlib.sha256(raw.encode()).hexdigest()


class ResponseCache:
    """Disk-backed store of cached responses.

    Stores serialised :class:`~reactiveapi.models.CacheEntry` dicts in a
    :class:`diskcache.Cache` directory.  Only GET entries with a 2xx status
    are accepted; anything else is ignored.

    Args:
        cache_dir: Root directory for the cache.  A ``responses/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag and default TTL).

    Example::

        cache = ResponseCache("/tmp/api-cache", CacheConfig(ttl_seconds=300))
        cache.store(entry)
        hit = cache.lookup(request)
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "responses"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def store(self, entry: CacheEntry) -> None:
        """Write *entry*, expiring after its own TTL or the configured default.

        Non-GET and non-2xx entries are silently skipped.
        """
        if self._cache is None:
            return
        if entry.method != HTTPMethod.GET:
            return
        if not (200 <= entry.status_code < 300):
            return

        ttl = entry.ttl_seconds if entry.ttl_seconds is not None else self._config.ttl_seconds
        self._cache.set(entry.key, entry.model_dump(mode="python"), expire=ttl)

    def lookup(self, request: Request) -> Optional[CacheEntry]:
        """Return the stored entry for *request*, or ``None`` on a miss.

        Non-GET requests always miss.
        """
        if self._cache is None:
            return None
        if request.method != HTTPMethod.GET:
            return None

        data = self._cache.get(make_cache_key(request.method, request.url))
        if data is None:
            return None
        return CacheEntry.model_validate(data)

    def invalidate(self, request: Request) -> None:
        """Remove the entry stored for *request*, if any."""
        if self._cache is None:
            return
        self._cache.delete(make_cache_key(request.method, request.url))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path), and
            ``ttl_seconds`` (int).
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "responses"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
