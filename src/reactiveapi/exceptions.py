"""Exception hierarchy for reactiveapi.

All exceptions inherit from :class:`ReactiveAPIError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`reactiveapi.exit_codes`.  Library callers receive these as the failure
outcome of a call; the CLI entry point in :func:`reactiveapi.app.main`
catches ``ReactiveAPIError`` and exits with the appropriate code.

Subclass hierarchy::

    ReactiveAPIError (exit 1)
    +-- RequestBuildError   (exit 2)
    +-- RequestRejected     (exit 9)
    +-- TransportError      (exit 6)
    +-- HTTPError           (exit 3 / 4 / 5 / 8, by status)
    +-- DecodeError         (exit 7)
    +-- AuthError           (exit 3)
    +-- ConfigError         (exit 1)

Cancellation is not part of this hierarchy: a cancelled call surfaces as
:class:`asyncio.CancelledError`.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Optional

from reactiveapi.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_REQUEST_REJECTED,
    EXIT_SERVER_ERROR,
)

if TYPE_CHECKING:
    from reactiveapi.models import Request, ResponseEnvelope


class ReactiveAPIError(Exception):
    """Base exception for all reactiveapi errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`reactiveapi.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class RequestBuildError(ReactiveAPIError):
    """Raised when a request cannot be built (bad URL, unencodable body)."""

    exit_code = EXIT_INVALID_USAGE


class RequestRejected(ReactiveAPIError):
    """Raised when a request interceptor vetoes or fails on an outbound request."""

    exit_code = EXIT_REQUEST_REJECTED


class TransportError(ReactiveAPIError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Never retried by the pipeline and never cached.
    """

    exit_code = EXIT_CONNECTION_ERROR


class HTTPError(ReactiveAPIError):
    """Raised when the API answers with a status outside ``[200, 300)``.

    Carries the status code and raw body so callers can decide whether to
    retry at a higher level.  ``request`` is the outbound request (after
    interceptors) and ``response`` the full envelope, when available.

    Args:
        status_code: The HTTP status code.
        body: The raw response body.
        request: The request that produced the response.
        response: The response envelope.
    """

    def __init__(
        self,
        status_code: int,
        body: bytes = b"",
        request: Optional[Request] = None,
        response: Optional[ResponseEnvelope] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.request = request
        self.response = response
        super().__init__(_http_message(status_code, body), _exit_code_for(status_code))


class DecodeError(ReactiveAPIError):
    """Raised when a response body cannot be decoded into the requested shape.

    Args:
        message: What went wrong (e.g. ``"expected array"``).
        body: The offending raw bytes.
        target: The type that decoding was attempted into.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(self, message: str, body: bytes = b"", target: Any = None):
        super().__init__(message)
        self.body = body
        self.target = target


class AuthError(ReactiveAPIError):
    """Raised when credentials cannot be resolved or a token refresh fails."""

    exit_code = EXIT_AUTH_FAILURE


class ConfigError(ReactiveAPIError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


def _exit_code_for(status: int) -> int:
    if status in (401, 403):
        return EXIT_AUTH_FAILURE
    if status == 404:
        return EXIT_NOT_FOUND
    if status >= 500:
        return EXIT_SERVER_ERROR
    return EXIT_HTTP_ERROR


def _http_message(status: int, body: bytes) -> str:
    """Build ``HTTP <status>: <detail>`` from a JSON or text error body."""
    msg = ""
    if body:
        try:
            detail = json.loads(body)
            if isinstance(detail, dict):
                msg = str(detail.get("message") or detail.get("error") or detail.get("detail") or "")
            else:
                msg = str(detail)
        except ValueError:
            msg = body[:200].decode("utf-8", errors="replace")

    prefix = f"HTTP {status}"
    return f"{prefix}: {msg}" if msg else prefix
