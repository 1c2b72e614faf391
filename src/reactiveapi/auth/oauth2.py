"""OAuth2 Client Credentials authentication.

:class:`OAuth2ClientCredentialsAuthenticator` performs the non-interactive
Client Credentials grant (:rfc:`6749` section 4.4), exchanging a
``client_id`` and ``client_secret`` for an access token at ``token_url``.
No token is fetched up front: the first call goes out unauthenticated, the
server answers 401, and the authenticator fetches a token and replays the
call once.  Later calls carry the token via the authenticator's interceptor
until the server rejects it again.

The token endpoint is called with a dedicated :class:`httpx.AsyncClient`,
not through the execution pipeline, so the token exchange is neither
intercepted nor cached.

:class:`OAuth2ClientCredentialsPlugin` builds the authenticator from a
profile's :class:`~reactiveapi.models.AuthConfig`.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import httpx

from reactiveapi.auth.base import AuthPlugin, AuthSetup
from reactiveapi.auth.refreshing import RefreshingAuthenticator
from reactiveapi.config import resolve_credential
from reactiveapi.exceptions import AuthError
from reactiveapi.models import AuthConfig


class OAuth2ClientCredentialsAuthenticator(RefreshingAuthenticator):
    """Refresh by running the OAuth2 client-credentials grant.

    Args:
        token_url: The token endpoint.
        client_id: OAuth2 client identifier.
        client_secret: OAuth2 client secret.
        scopes: Scopes requested with every token.
        statuses: Response statuses that trigger a refresh.
        http_client: Client used for the token request.  When omitted a
            short-lived client is created per refresh.
        timeout: Timeout for the token request in seconds.
    """

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        scopes: Iterable[str] = (),
        statuses: Iterable[int] = (401,),
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(statuses=statuses)
        self._token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._scopes = list(scopes)
        self._http_client = http_client
        self._timeout = timeout

    async def refresh_token(self) -> str:
        """POST to the token endpoint and return the new access token.

        Raises:
            AuthError: If the HTTP request fails or ``access_token`` is
                absent from the response.
        """
        data: dict[str, str] = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }
        if self._scopes:
            data["scope"] = " ".join(self._scopes)

        try:
            if self._http_client is not None:
                response = await self._post(self._http_client, data)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._post(client, data)
            response.raise_for_status()
            token_data: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as exc:
            raise AuthError(
                f"Token request failed with status {exc.response.status_code}: "
                f"{exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise AuthError(f"Token request failed: {exc}") from exc
        except ValueError as exc:
            raise AuthError(f"Token response is not valid JSON: {exc}") from exc

        token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not token:
            raise AuthError("Token response missing 'access_token' field")
        return str(token)

    async def _post(self, client: httpx.AsyncClient, data: dict[str, str]) -> httpx.Response:
        return await client.post(
            self._token_url,
            data=data,
            headers={"Accept": "application/json"},
        )


class OAuth2ClientCredentialsPlugin(AuthPlugin):
    """Build an :class:`OAuth2ClientCredentialsAuthenticator` from profile config."""

    @property
    def auth_type(self) -> str:
        return "oauth2_client_credentials"

    def setup(self, auth_config: AuthConfig) -> AuthSetup:
        errors = self.validate_config(auth_config)
        if errors:
            raise AuthError("; ".join(errors))
        assert auth_config.token_url is not None
        assert auth_config.client_id_source is not None
        assert auth_config.client_secret_source is not None

        authenticator = OAuth2ClientCredentialsAuthenticator(
            token_url=auth_config.token_url,
            client_id=resolve_credential(auth_config.client_id_source),
            client_secret=resolve_credential(auth_config.client_secret_source),
            scopes=auth_config.scopes,
            statuses=auth_config.statuses,
        )
        return AuthSetup(
            interceptors=[authenticator.interceptor],
            authenticator=authenticator,
        )

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.token_url:
            errors.append("OAuth2 client_credentials requires 'token_url'")
        if not auth_config.client_id_source:
            errors.append("OAuth2 client_credentials requires 'client_id_source'")
        if not auth_config.client_secret_source:
            errors.append("OAuth2 client_credentials requires 'client_secret_source'")
        return errors
