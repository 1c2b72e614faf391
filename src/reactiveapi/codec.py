"""JSON codec backed by :class:`pydantic.TypeAdapter`.

:class:`JSONDecoder` turns raw response bytes (or already-parsed JSON
values) into typed Python objects -- pydantic models, dataclasses,
``TypedDict`` classes, builtins, or any annotation pydantic understands.
:class:`JSONEncoder` performs the reverse for request bodies.

Type adapters are expensive to construct, so both classes keep one per
target type for the lifetime of the codec instance.
"""

from __future__ import annotations

import threading
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from reactiveapi.exceptions import DecodeError, RequestBuildError

T = TypeVar("T")


class Decoder(Protocol):
    """Anything that can decode bytes or parsed JSON into a target type."""

    def decode(self, target: Any, data: bytes) -> Any: ...

    def decode_value(self, target: Any, value: Any) -> Any: ...


class _AdapterCache:
    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}
        self._lock = threading.Lock()

    def get(self, target: Any) -> TypeAdapter[Any]:
        try:
            return self._adapters[target]
        except (KeyError, TypeError):
            pass
        adapter: TypeAdapter[Any] = TypeAdapter(target)
        try:
            with self._lock:
                self._adapters.setdefault(target, adapter)
        except TypeError:
            # Unhashable annotation; use the adapter once without caching.
            pass
        return adapter


class JSONDecoder:
    """Decode JSON bytes into typed values.

    Example::

        decoder = JSONDecoder()
        user = decoder.decode(User, b'{"id": 42, "name": "Ann"}')
    """

    def __init__(self, strict: bool | None = None) -> None:
        self._strict = strict
        self._adapters = _AdapterCache()

    def decode(self, target: type[T] | Any, data: bytes) -> T:
        """Parse and validate *data* as *target*.

        Raises:
            DecodeError: If *data* is not valid JSON or does not validate
                against *target*.  The error carries the offending bytes.
        """
        adapter = self._adapters.get(target)
        try:
            return adapter.validate_json(data, strict=self._strict)
        except ValidationError as exc:
            raise DecodeError(
                f"Cannot decode response as {_type_name(target)}: {exc}",
                body=data,
                target=target,
            ) from exc

    def decode_value(self, target: type[T] | Any, value: Any) -> T:
        """Validate an already-parsed JSON value as *target*."""
        adapter = self._adapters.get(target)
        try:
            return adapter.validate_python(value, strict=self._strict)
        except ValidationError as exc:
            raise DecodeError(
                f"Cannot decode element as {_type_name(target)}: {exc}",
                target=target,
            ) from exc


class JSONEncoder:
    """Encode request bodies to JSON bytes."""

    def __init__(self) -> None:
        self._adapters = _AdapterCache()

    def encode(self, value: Any) -> bytes:
        """Serialise *value* to JSON.

        Pydantic models are dumped by alias; anything else goes through a
        :class:`~pydantic.TypeAdapter` for its runtime type.

        Raises:
            RequestBuildError: If *value* cannot be serialised.
        """
        try:
            if isinstance(value, BaseModel):
                return value.model_dump_json(by_alias=True).encode("utf-8")
            return self._adapters.get(type(value)).dump_json(value)
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            raise RequestBuildError(f"Cannot encode request body: {exc}") from exc


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)
