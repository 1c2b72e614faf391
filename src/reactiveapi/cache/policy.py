"""Cache policies decide which successful exchanges are worth storing.

A cache policy is any callable ``(Exchange) -> Optional[CacheEntry]``.  The
execution pipeline calls it only for exchanges whose status is in
``[200, 300)`` and only when the transport has a response cache attached.
Returning ``None`` means "do not cache".

:class:`DefaultCachePolicy` caches GET responses, honours the
``Cache-Control`` directives ``no-store``, ``no-cache``, ``private`` and
``max-age``, and otherwise falls back to a fixed TTL.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from reactiveapi.cache.cache import make_cache_key
from reactiveapi.models import CacheEntry, Exchange, HTTPMethod

_UNCACHEABLE_DIRECTIVES = frozenset({"no-store", "no-cache", "private"})


class CachePolicy(Protocol):
    """Derive a storable entry from a successful exchange, or decline with ``None``."""

    def __call__(self, exchange: Exchange) -> Optional[CacheEntry]: ...


class DefaultCachePolicy:
    """Cache successful GET responses unless the server forbids it.

    Args:
        ttl_seconds: TTL used when the response has no ``max-age``.
            ``None`` defers to the store's configured default.
        methods: Methods whose responses may be cached.
    """

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        methods: Iterable[HTTPMethod] = (HTTPMethod.GET,),
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._methods = frozenset(methods)

    def __call__(self, exchange: Exchange) -> Optional[CacheEntry]:
        request, response = exchange.request, exchange.response
        if request.method not in self._methods:
            return None
        if not response.is_success:
            return None

        directives = parse_cache_control(response.header("Cache-Control"))
        if _UNCACHEABLE_DIRECTIVES & directives.keys():
            return None

        ttl = self._ttl_seconds
        max_age = directives.get("max-age")
        if max_age is not None:
            try:
                ttl = int(max_age)
            except ValueError:
                pass
        if ttl is not None and ttl <= 0:
            return None

        return CacheEntry(
            key=make_cache_key(request.method, request.url),
            method=request.method,
            url=request.url,
            status_code=response.status_code,
            headers=dict(response.headers),
            body=exchange.body,
            ttl_seconds=ttl,
        )


def parse_cache_control(value: Optional[str]) -> dict[str, Optional[str]]:
    """Parse a ``Cache-Control`` header into ``{directive: argument-or-None}``.

    Example::

        >>> parse_cache_control('public, max-age="60"')
        {'public': None, 'max-age': '60'}
    """
    directives: dict[str, Optional[str]] = {}
    if not value:
        return directives
    for part in value.split(","):
        name, sep, arg = part.strip().partition("=")
        if not name:
            continue
        directives[name.strip().lower()] = arg.strip().strip('"') if sep else None
    return directives
