"""Authentication for reactiveapi.

Two layers live here:

- The recovery contract the execution pipeline consumes:
  :class:`Authenticator`, a callable that turns a failed exchange into one
  replacement call (or declines).  :class:`RefreshingAuthenticator`,
  :class:`BearerTokenAuthenticator` and
  :class:`OAuth2ClientCredentialsAuthenticator` implement the
  refresh-then-replay pattern.
- Profile-driven wiring: :class:`AuthPlugin` strategies registered with an
  :class:`AuthManager` produce an :class:`AuthSetup` of interceptors plus
  an optional authenticator.

Typical usage::

    from reactiveapi.auth import create_default_manager

    setup = create_default_manager().setup(profile)
"""

from reactiveapi.auth.base import Authenticator, AuthPlugin, AuthSetup
from reactiveapi.auth.manager import AuthManager, create_default_manager
from reactiveapi.auth.oauth2 import (
    OAuth2ClientCredentialsAuthenticator,
    OAuth2ClientCredentialsPlugin,
)
from reactiveapi.auth.refreshing import BearerTokenAuthenticator, RefreshingAuthenticator
from reactiveapi.auth.static import APIKeyAuthPlugin, BasicAuthPlugin, BearerAuthPlugin

__all__ = [
    "APIKeyAuthPlugin",
    "AuthManager",
    "AuthPlugin",
    "AuthSetup",
    "Authenticator",
    "BasicAuthPlugin",
    "BearerAuthPlugin",
    "BearerTokenAuthenticator",
    "OAuth2ClientCredentialsAuthenticator",
    "OAuth2ClientCredentialsPlugin",
    "RefreshingAuthenticator",
    "create_default_manager",
]
