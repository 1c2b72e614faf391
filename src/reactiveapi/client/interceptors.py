"""Request interceptors and the ordered chain that applies them.

An interceptor is any callable ``(Request) -> Request``.  Interceptors run
before every dispatch, in registration order, each receiving the previous
one's output.  Because :class:`~reactiveapi.models.Request` is frozen, an
interceptor "modifies" a request by returning a new value, e.g.::

    def add_trace_id(request: Request) -> Request:
        return request.with_header("X-Trace-Id", new_trace_id())

    api.request_interceptors.add(add_trace_id)

:class:`InterceptorChain` is copy-on-write: :meth:`~InterceptorChain.add`
and :meth:`~InterceptorChain.remove` swap in a new tuple, so a call that
is already applying the chain keeps the snapshot it started with.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Mapping

from reactiveapi.exceptions import RequestRejected
from reactiveapi.models import Request

Interceptor = Callable[[Request], Request]
"""A pure request-to-request transform applied before every dispatch."""


class InterceptorChain:
    """Ordered, copy-on-write sequence of interceptors."""

    def __init__(self, interceptors: Iterable[Interceptor] = ()) -> None:
        self._interceptors: tuple[Interceptor, ...] = tuple(interceptors)

    def add(self, interceptor: Interceptor) -> None:
        """Append *interceptor*; it runs after every interceptor already registered."""
        self._interceptors = self._interceptors + (interceptor,)

    def remove(self, interceptor: Interceptor) -> None:
        """Remove the first registration of *interceptor*.

        Raises:
            ValueError: If *interceptor* is not registered.
        """
        items = list(self._interceptors)
        items.remove(interceptor)
        self._interceptors = tuple(items)

    def clear(self) -> None:
        self._interceptors = ()

    def __iter__(self) -> Iterator[Interceptor]:
        return iter(self._interceptors)

    def __len__(self) -> int:
        return len(self._interceptors)

    def __add__(self, other: Iterable[Interceptor]) -> InterceptorChain:
        return InterceptorChain(self._interceptors + tuple(other))

    def apply(self, request: Request) -> Request:
        """Fold *request* through every interceptor, left to right.

        Raises:
            RequestRejected: If an interceptor raises, or returns something
                other than a :class:`~reactiveapi.models.Request`.
        """
        for interceptor in self._interceptors:
            try:
                result = interceptor(request)
            except RequestRejected:
                raise
            except Exception as exc:
                raise RequestRejected(
                    f"Interceptor {_name(interceptor)} rejected {request.method.value} "
                    f"{request.url}: {exc}"
                ) from exc
            if not isinstance(result, Request):
                raise RequestRejected(
                    f"Interceptor {_name(interceptor)} returned {type(result).__name__}, "
                    "expected Request"
                )
            request = result
        return request


class StaticHeaders:
    """Set a fixed group of headers on every request, overriding existing values."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self._headers = dict(headers)

    def __call__(self, request: Request) -> Request:
        for name, value in self._headers.items():
            request = request.with_header(name, value)
        return request


class QueryParams:
    """Merge a fixed group of query parameters into every request URL."""

    def __init__(self, params: Mapping[str, Any]) -> None:
        self._params = dict(params)

    def __call__(self, request: Request) -> Request:
        return request.with_query_params(self._params)


class RequestLogger:
    """Log each outbound request at DEBUG and pass it through unchanged."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def __call__(self, request: Request) -> Request:
        self._logger.debug("%s %s", request.method.value, request.url)
        return request


def _name(interceptor: Interceptor) -> str:
    return getattr(interceptor, "__qualname__", None) or type(interceptor).__name__
