"""Tests for the decoding dispatcher."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel

from reactiveapi.client.decoding import decode_array, decode_none, decode_one
from reactiveapi.codec import JSONDecoder
from reactiveapi.exceptions import DecodeError


class Item(BaseModel):
    sku: str
    qty: int = 1


@pytest.fixture
def decoder() -> JSONDecoder:
    return JSONDecoder()


class TestDecodeOne:
    def test_model(self, decoder: JSONDecoder) -> None:
        assert decode_one(decoder, Item, b'{"sku": "A1", "qty": 3}') == Item(sku="A1", qty=3)

    def test_builtin_types(self, decoder: JSONDecoder) -> None:
        assert decode_one(decoder, dict[str, int], b'{"a": 1}') == {"a": 1}
        assert decode_one(decoder, Any, b"[1, 2]") == [1, 2]

    def test_empty_body_is_an_error(self, decoder: JSONDecoder) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode_one(decoder, Item, b"")
        assert exc_info.value.target is Item

    def test_strict_decoder_rejects_coercion(self) -> None:
        with pytest.raises(DecodeError):
            decode_one(JSONDecoder(strict=True), Item, b'{"sku": "A1", "qty": "3"}')


class TestDecodeArray:
    def test_elements_in_order(self, decoder: JSONDecoder) -> None:
        items = decode_array(decoder, Item, b'[{"sku": "A"}, {"sku": "B", "qty": 2}]')

        assert items == [Item(sku="A"), Item(sku="B", qty=2)]

    def test_not_json(self, decoder: JSONDecoder) -> None:
        with pytest.raises(DecodeError, match="invalid JSON"):
            decode_array(decoder, Item, b"<html>")

    @pytest.mark.parametrize("body", [b'{"sku": "A"}', b'"A"', b"null"])
    def test_top_level_must_be_array(self, decoder: JSONDecoder, body: bytes) -> None:
        with pytest.raises(DecodeError, match="expected array") as exc_info:
            decode_array(decoder, Item, body)
        assert exc_info.value.body == body

    def test_failing_element_index(self, decoder: JSONDecoder) -> None:
        body = b'[{"sku": "A"}, {"sku": "B"}, {"qty": 1}]'

        with pytest.raises(DecodeError, match="element 2") as exc_info:
            decode_array(decoder, Item, body)
        assert exc_info.value.body == body
        assert exc_info.value.target is Item


class TestDecodeNone:
    @pytest.mark.parametrize("body", [b"", b"{}", b"not json at all"])
    def test_always_none(self, body: bytes) -> None:
        assert decode_none(body) is None
