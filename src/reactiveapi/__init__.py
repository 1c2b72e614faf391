"""reactiveapi -- asynchronous client for JSON REST APIs.

Requests are described declaratively (method, URL, headers, query
parameters, body) and run through an execution pipeline that applies
request interceptors, dispatches over :mod:`httpx`, caches successful
responses, and lets an authenticator recover from an authentication failure
by replaying the call once with fresh credentials.  Responses decode into
typed values with :mod:`pydantic`.

Typical usage::

    from reactiveapi import JSONReactiveAPI, HttpxTransport

    async with JSONReactiveAPI(HttpxTransport(), "https://api.example.com") as api:
        user = await api.request(User, url="users/42")

Modules:
    client: Request builder, interceptors, pipeline, transport and the
        public :class:`JSONReactiveAPI` surface.
    auth: Authenticators and profile-driven auth plugins.
    cache: Disk-backed response cache and cache policies.
    codec: JSON encoding and pydantic-based decoding.
    config: XDG-aware configuration and profile management.
    exceptions: Error taxonomy with exit-code mapping.
    app: The ``reactiveapi`` command line.
"""

from reactiveapi.client import HttpxTransport, JSONReactiveAPI
from reactiveapi.models import HTTPMethod, Request

__version__ = "0.1.0"

__all__ = ["HTTPMethod", "HttpxTransport", "JSONReactiveAPI", "Request", "__version__"]
