"""Shared test fixtures for reactiveapi.

Provides config isolation, output-manager state handling, a sample profile,
and a CLI runner.  HTTP is faked per test module with
:class:`httpx.MockTransport` or an in-memory transport.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from reactiveapi.models import AuthConfig, Profile, RequestConfig
from reactiveapi.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager holds references to sys.stdout/sys.stderr taken when it was
    created; CliRunner swaps those streams, so a manager left over from one
    test would write to a closed file in the next.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_profile() -> Profile:
    """A profile with API key auth sourced from ``TEST_API_KEY``."""
    return Profile(
        name="test-api",
        base_url="http://localhost:8080",
        headers={"X-Client": "tests"},
        auth=AuthConfig(type="api_key", header="X-API-Key", source="env:TEST_API_KEY"),
        request=RequestConfig(timeout=5, verify_ssl=False),
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory at tmp_path and chdir there.

    Also clears the ``REACTIVEAPI_*`` environment variables so that a
    developer's own configuration never leaks into a test.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["REACTIVEAPI_PROFILE", "REACTIVEAPI_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN output manager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON output manager."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
