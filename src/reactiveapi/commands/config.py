"""Config commands -- view the resolved configuration.

Shows the global configuration and, when one resolves, the active profile
after environment overrides have been applied, along with which layer
(``cli``, ``env``, ``project``, ``global`` or ``auto``) selected it.
"""

from __future__ import annotations

import typer

from reactiveapi.exceptions import ConfigError
from reactiveapi.output import error, format_response, info, suggest

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the current configuration.

    Example::

        reactiveapi config show
        reactiveapi --profile github config show --json
    """
    from reactiveapi.config import get_config_dir, resolve_config, resolve_profile_name

    cli_profile = ctx.obj.get("profile") if ctx.obj else None
    try:
        config, profile = resolve_config(cli_profile=cli_profile)
        _, source = resolve_profile_name(config, cli_profile)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    data = {
        "global": config.model_dump(mode="json"),
        "profile": profile.model_dump(mode="json") if profile is not None else None,
        "profile_source": source,
    }
    format_response(data)
    if profile is None:
        suggest("Create a profile: reactiveapi init NAME --base-url URL")
