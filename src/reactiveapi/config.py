"""Where reactiveapi keeps its state, and how a command finds its profile.

Three JSON documents feed every command, each validated by its pydantic
model on the way in and dumped by it on the way out:

* :class:`~reactiveapi.models.GlobalConfig` -- ``config.json`` in the user
  config directory (cache settings, default profile).
* :class:`~reactiveapi.models.Profile` -- one file per API under
  ``profiles/``, written by ``reactiveapi init``.
* :class:`~reactiveapi.models.ProjectConfig` -- ``./reactiveapi.json``,
  pinning a profile for the current directory.

:func:`resolve_config` layers them with the ``REACTIVEAPI_*`` environment
variables.  :func:`resolve_credential` turns the credential *sources* kept
in profiles (``env:VAR``, ``file:/path``, ``prompt``) into secrets at call
time; secrets themselves are never written to disk.
"""

from __future__ import annotations

import contextlib
import getpass
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from reactiveapi.exceptions import ConfigError
from reactiveapi.models import GlobalConfig, Profile, ProjectConfig

APP_NAME = "reactiveapi"
PROJECT_CONFIG_FILENAME = "reactiveapi.json"

ENV_PROFILE = "REACTIVEAPI_PROFILE"
ENV_BASE_URL = "REACTIVEAPI_BASE_URL"

M = TypeVar("M", bound=BaseModel)

# kind -> (XDG variable, XDG default under $HOME, subdirectory of ~/.reactiveapi)
_DIRECTORIES: dict[str, tuple[str, str, str]] = {
    "config": ("XDG_CONFIG_HOME", ".config", ""),
    "cache": ("XDG_CACHE_HOME", ".cache", "cache"),
    "data": ("XDG_DATA_HOME", ".local/share", "data"),
}


def _app_dir(kind: str) -> Path:
    env_var, xdg_default, fallback = _DIRECTORIES[kind]
    system = platform.system()
    if system == "Linux" or system.endswith("BSD"):
        root = os.environ.get(env_var) or Path.home() / xdg_default
        path = Path(root) / APP_NAME
    else:
        path = Path.home() / f".{APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return (and create) the directory holding ``config.json`` and profiles.

    ``$XDG_CONFIG_HOME/reactiveapi`` on Linux/BSD, ``~/.reactiveapi``
    elsewhere.
    """
    return _app_dir("config")


def get_cache_dir() -> Path:
    """Return (and create) the response cache root.  Safe to delete."""
    return _app_dir("cache")


def get_data_dir() -> Path:
    """Return (and create) the directory crash logs are written under."""
    return _app_dir("data")


def get_profiles_dir() -> Path:
    path = get_config_dir() / "profiles"
    path.mkdir(exist_ok=True)
    return path


# --- Reading and writing models ---


def _read_model(path: Path, model: type[M], what: str) -> M:
    try:
        return model.model_validate_json(path.read_bytes())
    except (OSError, ValidationError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


def _write_model(path: Path, value: BaseModel) -> None:
    """Replace *path* with *value* as indented JSON.

    The document is written to a sibling temp file and renamed over *path*,
    so readers see either the old file or the new one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(value.model_dump_json(indent=2) + "\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


# --- Documents ---


def load_global_config() -> GlobalConfig:
    """Return the user-wide config, or defaults when none has been written.

    Raises:
        ConfigError: If ``config.json`` exists but does not validate.
    """
    path = get_config_dir() / "config.json"
    if not path.is_file():
        return GlobalConfig()
    return _read_model(path, GlobalConfig, "global config")


def load_project_config(directory: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Return ``reactiveapi.json`` from *directory* (default: cwd), if present."""
    path = (directory or Path.cwd()) / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_model(path, ProjectConfig, "project config")


def save_project_config(config: ProjectConfig, directory: Optional[Path] = None) -> Path:
    path = (directory or Path.cwd()) / PROJECT_CONFIG_FILENAME
    _write_model(path, config)
    return path


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Load profile *name*.

    Raises:
        ConfigError: If the profile is missing or does not validate.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    return _read_model(path, Profile, f"profile '{name}'")


def save_profile(profile: Profile) -> Path:
    path = _profile_path(profile.name)
    _write_model(path, profile)
    return path


# --- Resolution ---


def resolve_profile_name(
    config: GlobalConfig, cli_profile: Optional[str] = None
) -> tuple[Optional[str], Optional[str]]:
    """Pick the active profile name and report where it came from.

    The first of these that names a profile wins: the ``--profile`` flag
    (``"cli"``), ``REACTIVEAPI_PROFILE`` (``"env"``), ``./reactiveapi.json``
    (``"project"``) and ``default_profile`` in the global config
    (``"global"``).  Failing all of them, a lone saved profile is picked
    when ``auto_select_single_profile`` is on (``"auto"``).

    Returns:
        ``(name, source)``, or ``(None, None)`` when nothing is configured.
    """
    project = load_project_config()
    candidates = (
        ("cli", cli_profile),
        ("env", os.environ.get(ENV_PROFILE)),
        ("project", project.default_profile if project is not None else None),
        ("global", config.default_profile),
    )
    for source, name in candidates:
        if name:
            return name, source

    if config.auto_select_single_profile:
        names = list_profiles()
        if len(names) == 1:
            return names[0], "auto"
    return None, None


def resolve_config(
    cli_profile: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Return the global config and the active profile, if any.

    ``REACTIVEAPI_BASE_URL`` replaces the profile's base URL, which lets one
    profile be pointed at a staging host without editing it.
    """
    config = load_global_config()
    name, _ = resolve_profile_name(config, cli_profile)
    if name is None:
        return config, None

    profile = load_profile(name)
    base_url = os.environ.get(ENV_BASE_URL)
    if base_url:
        profile = profile.model_copy(update={"base_url": base_url})
    return config, profile


# --- Credentials ---


def _from_env(variable: str, source: str) -> str:
    value = os.environ.get(variable)
    if value is None:
        raise ConfigError(f"Environment variable '{variable}' is not set (source: {source})")
    return value


def _from_file(location: str, source: str) -> str:
    path = Path(location).expanduser()
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        raise ConfigError(f"Credential file not found: {path} (source: {source})") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc


def _from_prompt(label: str, source: str) -> str:
    if not sys.stdin.isatty():
        raise ConfigError(
            "Cannot prompt for credential: stdin is not a TTY. "
            "Use env:VAR or file:/path instead."
        )
    return getpass.getpass(f"{label or 'Credential'}: ")


_CREDENTIAL_READERS: dict[str, Callable[[str, str], str]] = {
    "env": _from_env,
    "file": _from_file,
    "prompt": _from_prompt,
}


def resolve_credential(source: str) -> str:
    """Read the secret described by *source*.

    ``env:VAR`` reads an environment variable, ``file:/path`` reads a file
    (surrounding whitespace stripped) and ``prompt`` or ``prompt:Label``
    asks on the terminal.

    Raises:
        ConfigError: If the source is malformed or cannot be read.
    """
    scheme, _, argument = source.partition(":")
    reader = _CREDENTIAL_READERS.get(scheme)
    if reader is None:
        raise ConfigError(f"Unknown credential source format: {source}")
    return reader(argument, source)
