"""Request command -- run one call through the execution pipeline.

``reactiveapi request GET users/42`` resolves the active profile, builds a
:class:`~reactiveapi.client.api.JSONReactiveAPI` from it (default headers,
auth, response cache) and prints the decoded payload to stdout.  Failures
exit with the code of the :class:`~reactiveapi.exceptions.ReactiveAPIError`
that ended the call.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from reactiveapi.client.response import extract_response_data
from reactiveapi.exceptions import ReactiveAPIError
from reactiveapi.exit_codes import EXIT_INVALID_USAGE
from reactiveapi.output import debug, error, format_response, info, suggest


def request_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method, e.g. GET or POST."),
    path: str = typer.Argument(help="Endpoint path relative to the base URL, or an absolute URL."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header as 'Name: value'. Repeatable."
    ),
    query: Optional[list[str]] = typer.Option(
        None, "--query", "-q", help="Query parameter as 'key=value'. Repeatable."
    ),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="JSON request body."
    ),
    as_list: bool = typer.Option(
        False, "--list", help="Require the response to be a JSON array."
    ),
    void: bool = typer.Option(
        False, "--void", help="Discard the response body."
    ),
) -> None:
    """Send one request with the active profile and print the response.

    Example::

        reactiveapi request GET users/42
        reactiveapi request GET users -q page=2 --list
        reactiveapi request POST users -d '{"name": "Ada"}'
        reactiveapi request DELETE items/1 --void
    """
    if as_list and void:
        error("--list and --void are mutually exclusive.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    try:
        headers = _parse_pairs(header or [], ":", "header")
        params = _parse_pairs(query or [], "=", "query parameter")
        body = _parse_body(data)
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    cli_profile = ctx.obj.get("profile") if ctx.obj else None
    try:
        result = asyncio.run(
            _send(cli_profile, method, path, headers, params, body, as_list, void)
        )
    except ReactiveAPIError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if void:
        info("Done.")
    elif result is not None:
        format_response(result)


async def _send(
    cli_profile: Optional[str],
    method: str,
    path: str,
    headers: dict[str, str],
    params: dict[str, str],
    body: Any,
    as_list: bool,
    void: bool,
) -> Any:
    from reactiveapi.cache import ResponseCache
    from reactiveapi.client.api import JSONReactiveAPI
    from reactiveapi.config import get_cache_dir, resolve_config
    from reactiveapi.exceptions import ConfigError

    config, profile = resolve_config(cli_profile=cli_profile)
    if profile is None:
        suggest("Create a profile: reactiveapi init NAME --base-url URL")
        raise ConfigError("No profile configured. Pass --profile or set REACTIVEAPI_PROFILE.")

    debug(f"Using profile: {profile.name}")
    cache = ResponseCache(get_cache_dir(), config.cache)
    try:
        async with JSONReactiveAPI.from_profile(profile, cache=cache) as api:
            kwargs: dict[str, Any] = {
                "url": path,
                "headers": headers or None,
                "query_params": params or None,
            }
            if isinstance(body, dict):
                kwargs["body_params"] = body
            elif body is not None:
                kwargs["body"] = body

            if void:
                await api.request_void(method, **kwargs)
                return None
            if as_list:
                return await api.request_list(Any, method, **kwargs)
            raw = await api.execute(api.build_request(method, **kwargs))
    finally:
        cache.close()

    return extract_response_data(raw)


def _parse_pairs(values: list[str], separator: str, label: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for value in values:
        name, sep, rest = value.partition(separator)
        if not sep or not name.strip():
            raise ValueError(f"Invalid {label} {value!r}: expected 'name{separator}value'")
        pairs[name.strip()] = rest.strip()
    return pairs


def _parse_body(data: Optional[str]) -> Any:
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Request body is not valid JSON: {exc}") from exc
