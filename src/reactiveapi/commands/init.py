"""Init command -- create a profile for one API.

``reactiveapi init github --base-url https://api.github.com`` writes a
:class:`~reactiveapi.models.Profile` under the profiles directory and a
project-local ``reactiveapi.json`` that makes it the default for the
current directory.  Auth is optional; credentials are never stored, only
their *sources* (``env:VAR``, ``file:/path`` or ``prompt``).
"""

from __future__ import annotations

from typing import Optional

import typer

from reactiveapi.exit_codes import EXIT_INVALID_USAGE
from reactiveapi.output import error, info, success, suggest


def init_command(
    name: str = typer.Argument(help="Profile name."),
    base_url: str = typer.Option(..., "--base-url", help="Base URL of the API."),
    auth_type: Optional[str] = typer.Option(
        None,
        "--auth-type",
        help="api_key, bearer, basic or oauth2_client_credentials.",
    ),
    auth_source: Optional[str] = typer.Option(
        None, "--auth-source", help="Credential source: env:VAR, file:/path or prompt."
    ),
    auth_header: Optional[str] = typer.Option(
        None, "--auth-header", help="Header name for api_key auth."
    ),
    token_url: Optional[str] = typer.Option(
        None, "--token-url", help="OAuth2 token endpoint."
    ),
    client_id_source: Optional[str] = typer.Option(
        None, "--client-id-source", help="OAuth2 client id source."
    ),
    client_secret_source: Optional[str] = typer.Option(
        None, "--client-secret-source", help="OAuth2 client secret source."
    ),
    scope: Optional[list[str]] = typer.Option(
        None, "--scope", help="OAuth2 scope. Repeatable."
    ),
) -> None:
    """Create a profile and make it the project default.

    Raises:
        typer.Exit: With code 2 if the base URL or auth settings are invalid.

    Example::

        reactiveapi init github --base-url https://api.github.com \\
            --auth-type bearer --auth-source env:GITHUB_TOKEN
    """
    from reactiveapi.auth import create_default_manager
    from reactiveapi.client.builder import is_absolute
    from reactiveapi.config import profile_exists, save_profile, save_project_config
    from reactiveapi.exceptions import AuthError
    from reactiveapi.models import AuthConfig, Profile, ProjectConfig

    if not is_absolute(base_url):
        error(f"Base URL must be an absolute http(s) URL: {base_url}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    auth: Optional[AuthConfig] = None
    if auth_type is not None:
        fields = {
            "type": auth_type,
            "source": auth_source,
            "header": auth_header,
            "token_url": token_url,
            "client_id_source": client_id_source,
            "client_secret_source": client_secret_source,
            "scopes": scope,
        }
        auth = AuthConfig(**{k: v for k, v in fields.items() if v is not None})
        try:
            plugin = create_default_manager().get_plugin(auth_type)
        except AuthError as exc:
            error(str(exc))
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
        problems = plugin.validate_config(auth)
        if problems:
            for problem in problems:
                error(problem)
            raise typer.Exit(code=EXIT_INVALID_USAGE)

    if profile_exists(name):
        info(f'Profile "{name}" already exists and will be overwritten.')

    save_profile(Profile(name=name, base_url=base_url, auth=auth))
    save_project_config(ProjectConfig(default_profile=name))

    success(f'Profile "{name}" created.')
    suggest("Try it: reactiveapi request GET <path>")
