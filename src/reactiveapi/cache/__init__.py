"""Response caching for reactiveapi.

This package provides the two halves of response caching:

- :class:`ResponseCache` -- a transparent, :mod:`diskcache`-backed store
  of successful GET responses, consulted by the transport before it goes
  to the network.
- :class:`CachePolicy` / :class:`DefaultCachePolicy` -- the decision of
  whether a successful exchange becomes a :class:`~reactiveapi.models.CacheEntry`.

The store is controlled by the ``cache`` section of the global
configuration (:class:`~reactiveapi.models.CacheConfig`).
"""

from reactiveapi.cache.cache import ResponseCache, make_cache_key
from reactiveapi.cache.policy import CachePolicy, DefaultCachePolicy, parse_cache_control

__all__ = [
    "CachePolicy",
    "DefaultCachePolicy",
    "ResponseCache",
    "make_cache_key",
    "parse_cache_control",
]
