"""Transport facade -- the single seam between reactiveapi and the network.

:class:`Transport` is the contract the execution pipeline and the
authenticators consume.  :class:`HttpxTransport` implements it on top of a
pooled :class:`httpx.AsyncClient`, which is safe to share between any number
of concurrent calls.

When a :class:`~reactiveapi.cache.ResponseCache` is attached, GET requests
are answered from the cache on a hit without any network I/O.  Writing to
that cache is the pipeline's job; the transport only reads.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from reactiveapi.cache import ResponseCache
from reactiveapi.exceptions import HTTPError, TransportError
from reactiveapi.models import Profile, Request, ResponseEnvelope

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Performs network calls for prepared requests."""

    cache: Optional[ResponseCache]

    async def send(self, request: Request) -> ResponseEnvelope:
        """Dispatch *request*, returning the response whatever its status.

        Raises:
            TransportError: If no response was received.
        """
        ...

    async def fetch(self, request: Request) -> bytes:
        """Dispatch *request* and return the body of a 2xx response.

        Raises:
            TransportError: If no response was received.
            HTTPError: If the status is outside ``[200, 300)``.
        """
        ...


class HttpxTransport:
    """:class:`Transport` backed by :class:`httpx.AsyncClient`.

    Args:
        client: An existing client to use.  When omitted, one is created
            with *timeout* and *verify_ssl* and closed by :meth:`aclose`.
        cache: Optional response cache consulted for GET requests.
        timeout: Request timeout in seconds for an owned client.
        verify_ssl: Whether an owned client verifies TLS certificates.

    Example::

        async with HttpxTransport(timeout=10) as transport:
            envelope = await transport.send(request)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[ResponseCache] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            verify=verify_ssl,
            follow_redirects=True,
        )
        self.cache = cache

    @classmethod
    def from_profile(
        cls, profile: Profile, cache: Optional[ResponseCache] = None
    ) -> HttpxTransport:
        """Create a transport using a profile's request settings."""
        return cls(
            cache=cache,
            timeout=profile.request.timeout,
            verify_ssl=profile.request.verify_ssl,
        )

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    async def send(self, request: Request) -> ResponseEnvelope:
        if self.cache is not None:
            hit = self.cache.lookup(request)
            if hit is not None:
                logger.debug("Cache hit: %s %s", request.method.value, request.url)
                return hit.to_envelope()

        try:
            response = await self._client.request(
                request.method.value,
                request.url,
                headers=request.headers,
                content=request.body,
            )
        except httpx.TransportError as exc:
            raise TransportError(
                f"{request.method.value} {request.url} failed: {exc}"
            ) from exc

        return ResponseEnvelope(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    async def fetch(self, request: Request) -> bytes:
        envelope = await self.send(request)
        if not envelope.is_success:
            raise HTTPError(
                envelope.status_code,
                envelope.body,
                request=request,
                response=envelope,
            )
        return envelope.body
