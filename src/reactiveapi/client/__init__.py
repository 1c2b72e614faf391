"""HTTP client layer for reactiveapi.

The pieces, in the order a call passes through them:

* :func:`build_request` -- turn a declarative description into a
  :class:`~reactiveapi.models.Request`.
* :class:`InterceptorChain` -- ordered request transforms.
* :class:`ExecutionPipeline` -- dispatch, status classification, caching,
  and single-shot auth recovery.
* :class:`HttpxTransport` -- the network call, backed by
  :class:`httpx.AsyncClient`, with cache reads for GET requests.
* :mod:`~reactiveapi.client.decoding` -- shape the bytes into the result.

:class:`JSONReactiveAPI` ties them together.
"""

from reactiveapi.client.api import JSONReactiveAPI
from reactiveapi.client.builder import build_request
from reactiveapi.client.interceptors import (
    Interceptor,
    InterceptorChain,
    QueryParams,
    RequestLogger,
    StaticHeaders,
)
from reactiveapi.client.pipeline import ExecutionPipeline
from reactiveapi.client.transport import HttpxTransport, Transport

__all__ = [
    "ExecutionPipeline",
    "HttpxTransport",
    "Interceptor",
    "InterceptorChain",
    "JSONReactiveAPI",
    "QueryParams",
    "RequestLogger",
    "StaticHeaders",
    "Transport",
    "build_request",
]
