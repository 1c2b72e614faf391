"""Build :class:`~reactiveapi.models.Request` values from call parameters.

:func:`build_request` is the only place where loosely-typed caller input
(header and query mappings that may contain ``None``, a body given either as
a mapping or as an encodable object) is turned into the immutable request
the pipeline works with.  Any problem here raises
:class:`~reactiveapi.exceptions.RequestBuildError` before the transport is
touched.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from reactiveapi.codec import JSONEncoder
from reactiveapi.exceptions import RequestBuildError
from reactiveapi.models import HTTPMethod, Request

JSON_CONTENT_TYPE = "application/json"

_default_encoder = JSONEncoder()


def build_request(
    url: str,
    method: HTTPMethod | str = HTTPMethod.GET,
    headers: Optional[Mapping[str, Optional[str]]] = None,
    query_params: Optional[Mapping[str, Any]] = None,
    body_params: Optional[Mapping[str, Any]] = None,
    body: Any = None,
    encoder: Optional[JSONEncoder] = None,
) -> Request:
    """Build a JSON request.

    Args:
        url: Absolute ``http``/``https`` URL.
        method: HTTP method.
        headers: Extra headers.  An entry whose value is ``None`` removes
            that header, including the ``Accept`` and ``Content-Type``
            defaults.
        query_params: Query-string parameters merged into *url*.  Entries
            whose value is ``None`` are dropped.
        body_params: JSON object body given as a mapping.  Top-level
            ``None`` values are dropped.
        body: JSON body given as an encodable value (pydantic model,
            dataclass, list, ...).  Mutually exclusive with *body_params*.
        encoder: Encoder used for *body* and *body_params*; defaults to
            :class:`JSONEncoder`.

    Returns:
        The built :class:`~reactiveapi.models.Request`.

    Raises:
        RequestBuildError: On an invalid method or URL, when both body
            forms are given, or when the body cannot be encoded.
    """
    try:
        http_method = HTTPMethod(method.upper() if isinstance(method, str) else method)
    except ValueError:
        raise RequestBuildError(f"Unsupported HTTP method: {method}") from None

    if body_params is not None and body is not None:
        raise RequestBuildError("Pass either body_params or body, not both")

    target = _parse_url(url)
    if query_params:
        params = {k: v for k, v in query_params.items() if v is not None}
        try:
            target = target.copy_merge_params(params)
        except TypeError as exc:
            raise RequestBuildError(f"Invalid query parameter: {exc}") from exc

    content: Optional[bytes] = None
    if body_params is not None:
        payload = {k: v for k, v in body_params.items() if v is not None}
        content = (encoder or _default_encoder).encode(payload)
    elif body is not None:
        content = (encoder or _default_encoder).encode(body)

    merged: dict[str, str] = {"Accept": JSON_CONTENT_TYPE}
    if content is not None:
        merged["Content-Type"] = JSON_CONTENT_TYPE
    request = Request(method=http_method, url=str(target), headers=merged, body=content)

    # Caller headers override the defaults regardless of case.
    for name, value in (headers or {}).items():
        if value is None:
            request = request.without_header(name)
        else:
            request = request.with_header(name, value)
    return request


def join_url(base_url: str, endpoint: str) -> str:
    """Join *endpoint* to *base_url* with exactly one ``/`` between them."""
    if not endpoint:
        return base_url
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


def is_absolute(url: str) -> bool:
    """Return ``True`` when *url* carries a scheme and host."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return False
    return bool(parsed.scheme and parsed.host)


def _parse_url(url: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise RequestBuildError(f"Invalid URL {url!r}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise RequestBuildError(f"URL must be absolute http(s): {url!r}")
    return parsed
