"""Token-refreshing authenticators.

:class:`RefreshingAuthenticator` implements the common "refresh the token,
replay the request once" recovery.  It pairs with its own
:meth:`~RefreshingAuthenticator.interceptor`, which stamps the current token
on every outbound request::

    auth = BearerTokenAuthenticator(refresh=login)
    api.request_interceptors.add(auth.interceptor)
    api.authenticator = auth

When several in-flight calls fail with 401 at once, only the first one
refreshes.  The others notice that the token changed since their request
was sent and replay straight away with the new one.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable, Optional

from reactiveapi.models import Exchange, Request

if TYPE_CHECKING:
    from reactiveapi.client.transport import Transport

logger = logging.getLogger(__name__)


class RefreshingAuthenticator(ABC):
    """Base for authenticators that recover by refreshing a token.

    Args:
        statuses: Response statuses this authenticator handles; any other
            status is declined.
        header: Header that carries the credential.
        scheme: Prefix placed before the token (``""`` for a bare token).
        token: Initial token, if one is already known.
    """

    def __init__(
        self,
        statuses: Iterable[int] = (401,),
        header: str = "Authorization",
        scheme: str = "Bearer",
        token: Optional[str] = None,
    ) -> None:
        self._statuses = frozenset(statuses)
        self._header = header
        self._scheme = scheme
        self._token = token
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token

    @abstractmethod
    async def refresh_token(self) -> str:
        """Obtain a new token.

        Raises:
            AuthError: If a token cannot be obtained.
        """
        ...

    def interceptor(self, request: Request) -> Request:
        """Attach the current token to *request*; pass it through if there is none."""
        if self._token is None:
            return request
        return request.with_header(self._header, self._credential(self._token))

    def __call__(
        self, exchange: Exchange, transport: Transport
    ) -> Optional[Awaitable[bytes]]:
        if exchange.response.status_code not in self._statuses:
            return None
        return self._refresh_and_replay(exchange.request, transport)

    async def _refresh_and_replay(self, request: Request, transport: Transport) -> bytes:
        sent = request.header(self._header)
        async with self._lock:
            if self._token is None or sent == self._credential(self._token):
                logger.debug("Refreshing token after %s %s", request.method.value, request.url)
                self._token = await self.refresh_token()
            token = self._token
        return await transport.fetch(request.with_header(self._header, self._credential(token)))

    def _credential(self, token: str) -> str:
        return f"{self._scheme} {token}" if self._scheme else token


class BearerTokenAuthenticator(RefreshingAuthenticator):
    """Refresh via a caller-supplied coroutine function.

    Args:
        refresh: Zero-argument coroutine function returning a new token.
        token: Initial token, if one is already known.
        statuses: Response statuses that trigger a refresh.

    Example::

        async def login() -> str:
            return (await auth_api.request(Token, HTTPMethod.POST, url="/login")).access_token

        auth = BearerTokenAuthenticator(refresh=login)
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[str]],
        token: Optional[str] = None,
        statuses: Iterable[int] = (401,),
    ) -> None:
        super().__init__(statuses=statuses, token=token)
        self._refresh = refresh

    async def refresh_token(self) -> str:
        return await self._refresh()
