"""Canonical Pydantic models shared across all reactiveapi modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Wire models** -- immutable values that flow through the execution pipeline:
    :class:`HTTPMethod`, :class:`Request`, :class:`ResponseEnvelope`,
    :class:`Exchange`, and :class:`CacheEntry`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`AuthConfig`, :class:`RequestConfig`, :class:`OutputConfig`,
    :class:`CacheConfig`, :class:`GlobalConfig`, and :class:`Profile`.

Wire models are frozen.  Helpers such as :meth:`Request.with_header` return a
new value instead of mutating the receiver, so a request handed to an
interceptor is never changed behind the caller's back.
"""

from __future__ import annotations

import enum
import time
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field


# --- Wire models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods accepted by the request family."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class Request(BaseModel):
    """An outbound HTTP request, immutable once built.

    Produced by :func:`~reactiveapi.client.builder.build_request` and
    threaded through the interceptor chain, where every interceptor returns
    a new value.

    Example::

        req = Request(method=HTTPMethod.GET, url="https://api.example.com/users/42")
        authed = req.with_header("Authorization", "Bearer tok")
        assert req.header("authorization") is None
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod = HTTPMethod.GET
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[bytes] = None

    def header(self, name: str) -> Optional[str]:
        """Return the value of header *name* (case-insensitive), or ``None``."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def with_header(self, name: str, value: str) -> Request:
        """Return a copy with header *name* set, replacing any existing value."""
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return self.model_copy(update={"headers": headers})

    def without_header(self, name: str) -> Request:
        """Return a copy with header *name* removed."""
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        return self.model_copy(update={"headers": headers})

    def with_query_params(self, params: Mapping[str, Any]) -> Request:
        """Return a copy whose URL has *params* merged into its query string."""
        url = httpx.URL(self.url).copy_merge_params(dict(params))
        return self.model_copy(update={"url": str(url)})


class ResponseEnvelope(BaseModel):
    """Status, headers, and body of one HTTP exchange.

    ``from_cache`` is set on envelopes rebuilt from a stored
    :class:`CacheEntry` rather than received from the network.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    from_cache: bool = False

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> Optional[str]:
        """Return the value of header *name* (case-insensitive), or ``None``."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


class Exchange(BaseModel):
    """The (request, response, body) triple offered to authenticators and cache policies."""

    model_config = ConfigDict(frozen=True)

    request: Request
    response: ResponseEnvelope

    @property
    def body(self) -> bytes:
        return self.response.body


class CacheEntry(BaseModel):
    """A storable response keyed to the request that produced it.

    Created by a :class:`~reactiveapi.cache.policy.CachePolicy` and written
    to a :class:`~reactiveapi.cache.ResponseCache`.  ``ttl_seconds`` of
    ``None`` means the store's configured default applies.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    method: HTTPMethod
    url: str
    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    ttl_seconds: Optional[int] = None
    stored_at: float = Field(default_factory=time.time)

    def to_envelope(self) -> ResponseEnvelope:
        """Rebuild the response envelope this entry was created from."""
        return ResponseEnvelope(
            status_code=self.status_code,
            headers=dict(self.headers),
            body=self.body,
            from_cache=True,
        )


# --- Configuration models ---


class AuthConfig(BaseModel):
    """Authentication configuration embedded in a :class:`Profile`.

    The ``type`` field selects the plugin registered with
    :class:`~reactiveapi.auth.manager.AuthManager`; the remaining fields
    supply plugin-specific parameters.  Extra fields are preserved in
    ``model_extra`` for third-party plugins.

    Example::

        AuthConfig(
            type="oauth2_client_credentials",
            token_url="https://auth.example.com/token",
            client_id_source="env:CLIENT_ID",
            client_secret_source="env:CLIENT_SECRET",
        )
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(
        description="Auth type: api_key, bearer, basic, oauth2_client_credentials"
    )
    header: Optional[str] = Field(
        default=None, description="Header name for api_key auth"
    )
    param_name: Optional[str] = Field(
        default=None, description="Query parameter name for api_key auth"
    )
    location: str = Field(
        default="header", description="Where to send api_key: header or query"
    )
    source: str = Field(
        default="prompt",
        description="Credential source: env:VAR, file:/path, prompt or prompt:Label",
    )
    # OAuth2 fields
    token_url: Optional[str] = None
    scopes: list[str] = Field(default_factory=list)
    client_id_source: Optional[str] = None
    client_secret_source: Optional[str] = None
    statuses: list[int] = Field(
        default_factory=lambda: [401],
        description="Response statuses that trigger a token refresh and replay",
    )


class RequestConfig(BaseModel):
    """Transport settings applied to every call made with a profile."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class CacheConfig(BaseModel):
    """HTTP response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable response caching")
    ttl_seconds: int = Field(default=300, description="Default cache TTL in seconds")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/reactiveapi/config.json``.

    Fields here have the lowest precedence and can be overridden by project
    config, environment variables, or CLI flags.  See
    :func:`~reactiveapi.config.resolve_config` for the full precedence chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class ProjectConfig(BaseModel):
    """Directory-local settings read from ``./reactiveapi.json``.

    Sits between the environment and :class:`GlobalConfig` when the active
    profile is chosen.  Unknown keys are ignored.
    """

    default_profile: Optional[str] = None


class Profile(BaseModel):
    """Per-API profile stored as JSON under the ``profiles/`` config directory.

    Bundles the base URL, default headers, authentication, and transport
    settings needed to talk to one API.  Profiles are created with
    ``reactiveapi init``.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    base_url: str = Field(description="Base URL that endpoint paths are joined to")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers added to every request"
    )
    auth: Optional[AuthConfig] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
