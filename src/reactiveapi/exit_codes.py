"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~reactiveapi.exceptions.ReactiveAPIError` subclass.
Shell wrappers can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ reactiveapi request GET /users/42
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The request could not be built from the supplied arguments."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed (HTTP 401/403 or token refresh)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The response body could not be decoded into the requested shape."""

EXIT_HTTP_ERROR = 8
"""The remote API returned any other non-2xx status."""

EXIT_REQUEST_REJECTED = 9
"""A request interceptor vetoed the call before it was sent."""

EXIT_CANCELLED = 130
"""The call was cancelled (Ctrl-C)."""
