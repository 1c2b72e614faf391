"""Authentication contracts.

This module defines the foundational types of the auth subsystem:

- :class:`Authenticator` -- the recovery capability the execution pipeline
  consults when a call fails with an HTTP error.  Any callable with the
  right signature qualifies; no base class is required.
- :class:`AuthSetup` -- what an auth plugin contributes to a client: the
  interceptors that attach credentials and, optionally, an authenticator.
- :class:`AuthPlugin` -- the abstract base class for profile-driven auth
  strategies registered with :class:`~reactiveapi.auth.manager.AuthManager`.

See Also:
    :mod:`reactiveapi.auth.manager` for plugin registration and dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Optional, Protocol

from reactiveapi.models import AuthConfig, Exchange

if TYPE_CHECKING:
    from reactiveapi.client.interceptors import Interceptor
    from reactiveapi.client.transport import Transport


class Authenticator(Protocol):
    """Turn a failed exchange into a replacement call, or decline.

    Called synchronously with the failed exchange (outbound request, error
    response, body) and the transport.  Returning an awaitable means "await
    this instead"; its outcome, success or failure, becomes the outcome of
    the original call and is never retried again.  Returning ``None``
    declines and the original :class:`~reactiveapi.exceptions.HTTPError`
    propagates.

    Example::

        def reauthenticate(exchange, transport):
            if exchange.response.status_code != 401:
                return None
            return transport.fetch(exchange.request.with_header("Authorization", fresh()))
    """

    def __call__(
        self, exchange: Exchange, transport: Transport
    ) -> Optional[Awaitable[bytes]]: ...


class AuthSetup:
    """Container for what an auth plugin wires into a client.

    Args:
        interceptors: Interceptors that attach credentials to outbound
            requests, in the order they should run.
        authenticator: Optional recovery capability for failed calls.

    Example::

        setup = AuthSetup(interceptors=[StaticHeaders({"X-API-Key": key})])
        assert setup.authenticator is None
    """

    def __init__(
        self,
        interceptors: list[Interceptor] | None = None,
        authenticator: Optional[Authenticator] = None,
    ):
        self.interceptors = interceptors or []
        self.authenticator = authenticator


class AuthPlugin(ABC):
    """Abstract base class for profile-driven authentication strategies.

    Every concrete strategy must subclass this and provide:

    1. An :attr:`auth_type` property returning a unique string identifier
       (e.g. ``"api_key"``, ``"bearer"``, ``"oauth2_client_credentials"``).
    2. A :meth:`setup` implementation that resolves credentials from the
       supplied :class:`~reactiveapi.models.AuthConfig` and returns an
       :class:`AuthSetup`.
    """

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """Return the unique auth type identifier this plugin handles."""
        ...

    @abstractmethod
    def setup(self, auth_config: AuthConfig) -> AuthSetup:
        """Resolve credentials and return the interceptors/authenticator to install.

        Raises:
            AuthError: If the configuration is unusable.
            ConfigError: If a credential source cannot be resolved.
        """
        ...

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        """Validate the auth configuration before use.

        Returns:
            A list of error message strings.  An empty list means the
            configuration is valid.
        """
        return []
