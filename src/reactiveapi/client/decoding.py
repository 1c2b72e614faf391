"""Decoding dispatcher -- turn pipeline output into the caller's result shape.

Three shapes are supported over the same raw bytes:

* :func:`decode_one` -- a single typed value.
* :func:`decode_array` -- a list of typed values; the body's top level must
  be a JSON array.
* :func:`decode_none` -- no value; the body is discarded unread.

These functions only ever see bytes from a successful pipeline run.
Pipeline failures propagate before decoding is attempted.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

from reactiveapi.codec import Decoder
from reactiveapi.exceptions import DecodeError

T = TypeVar("T")


def decode_one(decoder: Decoder, target: type[T] | Any, data: bytes) -> T:
    """Decode *data* as a single *target* value.

    Raises:
        DecodeError: If the decoder rejects *data*.
    """
    return decoder.decode(target, data)


def decode_array(decoder: Decoder, item_type: type[T] | Any, data: bytes) -> list[T]:
    """Decode *data* as a JSON array of *item_type*, preserving element order.

    Raises:
        DecodeError: If *data* is not JSON, its top level is not an array,
            or any element fails to decode.
    """
    try:
        parsed = json.loads(data)
    except ValueError as exc:
        raise DecodeError(f"invalid JSON: {exc}", body=data, target=list[item_type]) from exc

    if not isinstance(parsed, list):
        raise DecodeError("expected array", body=data, target=list[item_type])

    items: list[T] = []
    for index, element in enumerate(parsed):
        try:
            items.append(decoder.decode_value(item_type, element))
        except DecodeError as exc:
            raise DecodeError(
                f"element {index}: {exc}", body=data, target=item_type
            ) from exc
    return items


def decode_none(data: bytes) -> None:
    """Discard *data*."""
    return None
