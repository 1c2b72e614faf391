"""Public request surface for JSON REST APIs.

:class:`JSONReactiveAPI` combines the request builder, the
:class:`~reactiveapi.client.pipeline.ExecutionPipeline` and the decoding
dispatcher into three coroutine methods that differ only in result shape:

* :meth:`~JSONReactiveAPI.request` -- one decoded value.
* :meth:`~JSONReactiveAPI.request_list` -- a list of decoded values.
* :meth:`~JSONReactiveAPI.request_void` -- no value.

Each accepts the HTTP method (default ``GET``), a URL (absolute, or
relative to the base URL), optional headers, optional query parameters, and
a body given either as a mapping (``body_params``) or as an encodable value
(``body``).

Example::

    async with JSONReactiveAPI(HttpxTransport(), "https://api.example.com") as api:
        user = await api.request(User, url="users/42")
        users = await api.request_list(User, url="users", query_params={"page": 2})
        await api.request_void(HTTPMethod.DELETE, url="items/1")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, TypeVar

from reactiveapi.client import builder
from reactiveapi.client.decoding import decode_array, decode_none, decode_one
from reactiveapi.client.interceptors import InterceptorChain, StaticHeaders
from reactiveapi.client.pipeline import ExecutionPipeline
from reactiveapi.codec import Decoder, JSONDecoder, JSONEncoder
from reactiveapi.models import HTTPMethod, Profile, Request

if TYPE_CHECKING:
    from reactiveapi.auth.base import Authenticator
    from reactiveapi.auth.manager import AuthManager
    from reactiveapi.cache import ResponseCache
    from reactiveapi.cache.policy import CachePolicy
    from reactiveapi.client.transport import Transport

T = TypeVar("T")


class JSONReactiveAPI:
    """Asynchronous client for one JSON REST API.

    Args:
        transport: The transport facade that performs network calls.
        base_url: Base URL that relative endpoint paths are joined to.
        decoder: Decoder for response bodies; defaults to
            :class:`~reactiveapi.codec.JSONDecoder`.
        encoder: Encoder for ``body`` values; defaults to
            :class:`~reactiveapi.codec.JSONEncoder`.
        authenticator: Optional recovery capability for HTTP errors.
        interceptors: Initial request interceptors, in order.
        cache_policy: Optional policy deciding which successes are cached.

    ``authenticator`` and ``cache_policy`` are plain attributes and
    ``request_interceptors`` is a live
    :class:`~reactiveapi.client.interceptors.InterceptorChain`; all three
    can be reconfigured between calls.
    """

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        decoder: Optional[Decoder] = None,
        encoder: Optional[JSONEncoder] = None,
        authenticator: Optional[Authenticator] = None,
        interceptors: Optional[InterceptorChain] = None,
        cache_policy: Optional[CachePolicy] = None,
    ) -> None:
        self._base_url = base_url
        self._decoder = decoder or JSONDecoder()
        self._encoder = encoder or JSONEncoder()
        self._pipeline = ExecutionPipeline(
            transport,
            interceptors=interceptors,
            authenticator=authenticator,
            cache_policy=cache_policy,
        )

    @classmethod
    def from_profile(
        cls,
        profile: Profile,
        cache: Optional[ResponseCache] = None,
        auth_manager: Optional[AuthManager] = None,
        decoder: Optional[Decoder] = None,
    ) -> JSONReactiveAPI:
        """Build a client from a stored :class:`~reactiveapi.models.Profile`.

        Installs the profile's default headers, then the interceptors and
        authenticator of its auth plugin.  When *cache* is given and enabled,
        a :class:`~reactiveapi.cache.DefaultCachePolicy` is installed too.

        Raises:
            AuthError: If the profile's auth type is unknown or misconfigured.
            ConfigError: If a credential source cannot be resolved.
        """
        from reactiveapi.auth.manager import create_default_manager
        from reactiveapi.cache import DefaultCachePolicy
        from reactiveapi.client.transport import HttpxTransport

        setup = (auth_manager or create_default_manager()).setup(profile)

        interceptors = InterceptorChain()
        if profile.headers:
            interceptors.add(StaticHeaders(profile.headers))
        for interceptor in setup.interceptors:
            interceptors.add(interceptor)

        cache_policy = DefaultCachePolicy() if cache is not None and cache.enabled else None
        return cls(
            HttpxTransport.from_profile(profile, cache=cache),
            profile.base_url,
            decoder=decoder,
            authenticator=setup.authenticator,
            interceptors=interceptors,
            cache_policy=cache_policy,
        )

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def transport(self) -> Transport:
        return self._pipeline.transport

    @property
    def request_interceptors(self) -> InterceptorChain:
        return self._pipeline.interceptors

    @property
    def authenticator(self) -> Optional[Authenticator]:
        return self._pipeline.authenticator

    @authenticator.setter
    def authenticator(self, value: Optional[Authenticator]) -> None:
        self._pipeline.authenticator = value

    @property
    def cache_policy(self) -> Optional[CachePolicy]:
        return self._pipeline.cache_policy

    @cache_policy.setter
    def cache_policy(self, value: Optional[CachePolicy]) -> None:
        self._pipeline.cache_policy = value

    def absolute_url(self, endpoint: str) -> str:
        """Join *endpoint* to the base URL."""
        return builder.join_url(self._base_url, endpoint)

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> JSONReactiveAPI:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if it supports closing."""
        aclose = getattr(self._pipeline.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    # ------------------------------------------------------------------ #
    # Request family
    # ------------------------------------------------------------------ #

    async def request(
        self,
        response_type: type[T] | Any,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        url: str,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        body_params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> T:
        """Send a request and decode the body as one *response_type* value.

        Raises:
            RequestBuildError: If the request cannot be built.
            RequestRejected: If an interceptor vetoes the request.
            TransportError: If no response was received.
            HTTPError: For a non-2xx status that was not recovered.
            DecodeError: If the body does not decode as *response_type*.
        """
        request = self.build_request(
            method, url=url, headers=headers, query_params=query_params,
            body_params=body_params, body=body,
        )
        data = await self._pipeline.execute(request)
        return decode_one(self._decoder, response_type, data)

    async def request_list(
        self,
        item_type: type[T] | Any,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        url: str,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        body_params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> list[T]:
        """Send a request and decode the body as a list of *item_type*.

        Raises:
            DecodeError: If the body is not a JSON array, or an element
                does not decode as *item_type*.  Other errors as for
                :meth:`request`.
        """
        request = self.build_request(
            method, url=url, headers=headers, query_params=query_params,
            body_params=body_params, body=body,
        )
        data = await self._pipeline.execute(request)
        return decode_array(self._decoder, item_type, data)

    async def request_void(
        self,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        url: str,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        body_params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> None:
        """Send a request whose response carries no content of interest.

        The body is discarded without being decoded.  Errors as for
        :meth:`request`, except that no :class:`DecodeError` is possible.
        """
        request = self.build_request(
            method, url=url, headers=headers, query_params=query_params,
            body_params=body_params, body=body,
        )
        decode_none(await self._pipeline.execute(request))

    async def execute(self, request: Request) -> bytes:
        """Run an already-built request through the pipeline and return raw bytes."""
        return await self._pipeline.execute(request)

    def build_request(
        self,
        method: HTTPMethod | str = HTTPMethod.GET,
        *,
        url: str,
        headers: Optional[Mapping[str, Optional[str]]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        body_params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> Request:
        """Build the :class:`~reactiveapi.models.Request` the request family would send.

        Relative URLs are joined to the base URL.  Interceptors are not
        applied here; they run inside :meth:`execute`.

        Raises:
            RequestBuildError: If the request cannot be built.
        """
        target = url if builder.is_absolute(url) else self.absolute_url(url)
        return builder.build_request(
            target,
            method=method,
            headers=headers,
            query_params=query_params,
            body_params=body_params,
            body=body,
            encoder=self._encoder,
        )
