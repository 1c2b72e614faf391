"""Tests for JSON encoding and decoding."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

import pytest
from pydantic import BaseModel, Field
from pydantic_core import PydanticSerializationError

from reactiveapi.codec import JSONDecoder, JSONEncoder
from reactiveapi.exceptions import DecodeError, RequestBuildError


class Account(BaseModel):
    account_id: int = Field(alias="accountId")
    nickname: Optional[str] = None


@dataclass
class Event:
    name: str
    on: date


class TestJSONDecoder:
    def test_alias_fields(self) -> None:
        account = JSONDecoder().decode(Account, b'{"accountId": 7}')

        assert account.account_id == 7

    def test_dataclass(self) -> None:
        event = JSONDecoder().decode(Event, b'{"name": "launch", "on": "2024-05-01"}')

        assert event == Event("launch", date(2024, 5, 1))

    def test_invalid_json_carries_body(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            JSONDecoder().decode(Account, b"{oops")

        assert exc_info.value.body == b"{oops"
        assert "Account" in str(exc_info.value)

    def test_decode_value_from_parsed_json(self) -> None:
        assert JSONDecoder().decode_value(list[int], [1, "2"]) == [1, 2]

    def test_decode_value_failure(self) -> None:
        with pytest.raises(DecodeError):
            JSONDecoder().decode_value(int, "seven")

    def test_unhashable_target(self) -> None:
        assert JSONDecoder().decode(list[dict[str, int]], b'[{"a": 1}]') == [{"a": 1}]


class TestJSONEncoder:
    def test_model_by_alias(self) -> None:
        assert JSONEncoder().encode(Account(accountId=3)) == b'{"accountId":3,"nickname":null}'

    def test_dataclass_and_dates(self) -> None:
        assert JSONEncoder().encode(Event("launch", date(2024, 5, 1))) == (
            b'{"name":"launch","on":"2024-05-01"}'
        )

    def test_list(self) -> None:
        assert JSONEncoder().encode([1, 2]) == b"[1,2]"

    def test_unencodable(self) -> None:
        with pytest.raises(RequestBuildError):
            JSONEncoder().encode(object())

    def test_serialization_error_is_chained(self) -> None:
        with pytest.raises(RequestBuildError) as exc_info:
            JSONEncoder().encode({"when": object()})
        assert isinstance(exc_info.value.__cause__, PydanticSerializationError)
