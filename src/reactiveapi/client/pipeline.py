"""Execution pipeline -- every outbound call passes through here.

:meth:`ExecutionPipeline.execute` runs one logical call in a fixed order:

1. Fold the request through the interceptor chain.
2. Dispatch the outbound request via the transport.  A
   :class:`~reactiveapi.exceptions.TransportError` propagates immediately.
3. Classify the status: ``[200, 300)`` is success, anything else becomes an
   :class:`~reactiveapi.exceptions.HTTPError`.
4. On success, offer the exchange to the cache policy and write the entry it
   returns into the transport's response cache.  Caching is best-effort; a
   failure there never fails the call.
5. Return the raw body.
6. On an HTTP error, offer the exchange to the authenticator.  If it returns
   a replacement call, the outcome of that call (success or failure) is the
   outcome of ``execute``.  If it declines, the original error propagates.

The replacement call is awaited directly and never re-enters the pipeline,
so a logical call makes at most one recovery attempt.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Awaitable, Optional

from reactiveapi.client.interceptors import InterceptorChain
from reactiveapi.exceptions import HTTPError
from reactiveapi.models import Exchange, Request

if TYPE_CHECKING:
    from reactiveapi.auth.base import Authenticator
    from reactiveapi.cache.policy import CachePolicy
    from reactiveapi.client.transport import Transport

logger = logging.getLogger(__name__)


class ExecutionPipeline:
    """Orchestrates interceptors, dispatch, caching, and auth recovery.

    Args:
        transport: Performs the network call.  Its ``cache`` attribute is
            the store successful responses are written to.
        interceptors: Request interceptors, applied in order.
        authenticator: Optional recovery capability for HTTP errors.
        cache_policy: Optional policy deciding which successes are cached.

    ``interceptors``, ``authenticator`` and ``cache_policy`` may be changed
    at any time; each call reads them once, when it starts.
    """

    def __init__(
        self,
        transport: Transport,
        interceptors: Optional[InterceptorChain] = None,
        authenticator: Optional[Authenticator] = None,
        cache_policy: Optional[CachePolicy] = None,
    ) -> None:
        self.transport = transport
        self.interceptors = interceptors if interceptors is not None else InterceptorChain()
        self.authenticator = authenticator
        self.cache_policy = cache_policy

    async def execute(self, request: Request) -> bytes:
        """Run *request* through the pipeline and return the response body.

        Raises:
            RequestRejected: If an interceptor vetoes the request.
            TransportError: If no response was received.
            HTTPError: For a non-2xx status that was not recovered.
            asyncio.CancelledError: If the call is cancelled, including
                while a replacement call is in flight.
        """
        authenticator = self.authenticator
        cache_policy = self.cache_policy
        outbound = self.interceptors.apply(request)

        try:
            return await self._dispatch(outbound, cache_policy)
        except HTTPError as exc:
            replacement = self._recover(authenticator, exc)
            if replacement is None:
                raise

        logger.debug("Replaying %s %s after recovery", outbound.method.value, outbound.url)
        return await replacement

    async def _dispatch(self, outbound: Request, cache_policy: Optional[CachePolicy]) -> bytes:
        logger.debug("Dispatching %s %s", outbound.method.value, outbound.url)
        response = await self.transport.send(outbound)
        if not response.is_success:
            raise HTTPError(
                response.status_code,
                response.body,
                request=outbound,
                response=response,
            )

        self._store(Exchange(request=outbound, response=response), cache_policy)
        return response.body

    def _store(self, exchange: Exchange, cache_policy: Optional[CachePolicy]) -> None:
        cache = self.transport.cache
        if cache_policy is None or cache is None or exchange.response.from_cache:
            return
        try:
            entry = cache_policy(exchange)
            if entry is not None:
                cache.store(entry)
        except Exception:
            logger.debug(
                "Cache write failed for %s %s",
                exchange.request.method.value,
                exchange.request.url,
                exc_info=True,
            )

    def _recover(
        self, authenticator: Optional[Authenticator], error: HTTPError
    ) -> Optional[Awaitable[bytes]]:
        if authenticator is None or error.request is None or error.response is None:
            return None
        exchange = Exchange(request=error.request, response=error.response)
        try:
            replacement = authenticator(exchange, self.transport)
        except Exception:
            logger.debug("Authenticator failed on HTTP %s; keeping original error",
                         error.status_code, exc_info=True)
            return None
        if replacement is not None and not inspect.isawaitable(replacement):
            logger.debug("Authenticator returned %r; keeping original error", type(replacement))
            return None
        return replacement
