"""Bridge between raw response bodies and the CLI output system.

The library returns bytes (or decoded values); the ``request`` command has
no target type to decode into, so :func:`extract_response_data` turns the
body into something :mod:`reactiveapi.output` can render.
"""

from __future__ import annotations

import json
from typing import Any


def extract_response_data(body: bytes) -> Any:
    """Best-effort view of *body*: parsed JSON, else text, else ``None`` when empty."""
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return body.decode("utf-8", errors="replace")
