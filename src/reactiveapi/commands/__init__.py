"""Built-in CLI commands for reactiveapi.

* :mod:`~reactiveapi.commands.request` -- run one call through the pipeline.
* :mod:`~reactiveapi.commands.init` -- create a profile.
* :mod:`~reactiveapi.commands.cache` -- inspect and clear the response cache.
* :mod:`~reactiveapi.commands.config` -- show the resolved configuration.

Single commands export a plain callback registered on the root app; groups
export a :class:`typer.Typer` sub-application.
"""
