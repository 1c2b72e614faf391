"""Cache commands -- inspect and clear the on-disk response cache."""

from __future__ import annotations

import typer

from reactiveapi.output import info, print_table, success

cache_app = typer.Typer(no_args_is_help=True)


def _open_cache():
    from reactiveapi.cache import ResponseCache
    from reactiveapi.config import get_cache_dir, load_global_config

    return ResponseCache(get_cache_dir(), load_global_config().cache)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the number of cached responses and where they live.

    Example::

        reactiveapi cache stats --json
    """
    cache = _open_cache()
    try:
        stats = cache.stats()
    finally:
        cache.close()

    if not stats["enabled"]:
        info("Response caching is disabled.")
    print_table(stats, title="Response cache")


@cache_app.command("clear")
def cache_clear() -> None:
    """Remove every cached response."""
    cache = _open_cache()
    try:
        cache.clear()
    finally:
        cache.close()
    success("Response cache cleared.")
