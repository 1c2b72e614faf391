"""Auth plugins for fixed credentials.

These strategies never need to recover from a failed call: the credential
is resolved once when the client is created and attached to every request by
an interceptor.  Their :class:`~reactiveapi.auth.base.AuthSetup` therefore
carries interceptors only.

- :class:`APIKeyAuthPlugin` -- ``api_key`` in a header or query parameter.
- :class:`BearerAuthPlugin` -- ``Authorization: Bearer <token>``.
- :class:`BasicAuthPlugin` -- ``Authorization: Basic <base64(user:pass)>``.
"""

from __future__ import annotations

import base64

from reactiveapi.auth.base import AuthPlugin, AuthSetup
from reactiveapi.client.interceptors import QueryParams, StaticHeaders
from reactiveapi.config import resolve_credential
from reactiveapi.exceptions import AuthError
from reactiveapi.models import AuthConfig


class APIKeyAuthPlugin(AuthPlugin):
    """Authenticate via an API key placed in a header or query parameter.

    The key name is taken from ``auth_config.header`` (for ``header``) or
    ``auth_config.param_name`` (for ``query``), falling back to
    ``X-API-Key`` / ``api_key``.
    """

    @property
    def auth_type(self) -> str:
        return "api_key"

    def setup(self, auth_config: AuthConfig) -> AuthSetup:
        credential = resolve_credential(auth_config.source)

        if auth_config.location == "query":
            key_name = auth_config.param_name or auth_config.header or "api_key"
            return AuthSetup(interceptors=[QueryParams({key_name: credential})])

        if auth_config.location != "header":
            raise AuthError(
                f"Unsupported api_key location '{auth_config.location}': "
                "must be 'header' or 'query'"
            )
        key_name = auth_config.header or auth_config.param_name or "X-API-Key"
        return AuthSetup(interceptors=[StaticHeaders({key_name: credential})])

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.source:
            errors.append("API key auth requires a 'source' for the credential")
        if auth_config.location not in ("header", "query"):
            errors.append(
                f"Invalid location '{auth_config.location}': must be 'header' or 'query'"
            )
        return errors


class BearerAuthPlugin(AuthPlugin):
    """Send a static bearer token resolved from ``auth_config.source``."""

    @property
    def auth_type(self) -> str:
        return "bearer"

    def setup(self, auth_config: AuthConfig) -> AuthSetup:
        token = resolve_credential(auth_config.source)
        return AuthSetup(interceptors=[StaticHeaders({"Authorization": f"Bearer {token}"})])


class BasicAuthPlugin(AuthPlugin):
    """HTTP Basic authentication.

    ``auth_config.source`` must resolve to ``username:password``.
    """

    @property
    def auth_type(self) -> str:
        return "basic"

    def setup(self, auth_config: AuthConfig) -> AuthSetup:
        credential = resolve_credential(auth_config.source)
        if ":" not in credential:
            raise AuthError("Basic auth credential must be in 'username:password' form")
        encoded = base64.b64encode(credential.encode("utf-8")).decode("ascii")
        return AuthSetup(interceptors=[StaticHeaders({"Authorization": f"Basic {encoded}"})])
