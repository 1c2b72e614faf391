"""Tests for the JSONReactiveAPI request family."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest
from pydantic import BaseModel

from reactiveapi.auth import BearerTokenAuthenticator
from reactiveapi.cache import DefaultCachePolicy, ResponseCache
from reactiveapi.client.api import JSONReactiveAPI
from reactiveapi.client.transport import HttpxTransport
from reactiveapi.exceptions import AuthError, DecodeError, HTTPError, RequestBuildError
from reactiveapi.models import AuthConfig, CacheConfig, HTTPMethod, Profile


class User(BaseModel):
    id: int
    name: str


class NewUser(BaseModel):
    name: str
    email: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


BASE_URL = "https://api.example.com/v1"


class Recorder:
    """httpx handler that records requests and replies from a routing function."""

    def __init__(self, route) -> None:
        self.route = route
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.route(request)


def _make_api(recorder: Recorder, **kwargs: Any) -> JSONReactiveAPI:
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    cache = kwargs.pop("cache", None)
    return JSONReactiveAPI(HttpxTransport(client=client, cache=cache), BASE_URL, **kwargs)


def _json(data: Any, status_code: int = 200, headers: Optional[dict[str, str]] = None):
    return httpx.Response(status_code, json=data, headers=headers)


def _run(coro):
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Result shapes
# ---------------------------------------------------------------------------


class TestRequest:
    def test_get_decodes_single_value(self) -> None:
        recorder = Recorder(lambda r: _json({"id": 42, "name": "Ann"}))
        api = _make_api(recorder)

        user = _run(api.request(User, url="users/42"))

        assert user == User(id=42, name="Ann")
        assert str(recorder.requests[0].url) == "https://api.example.com/v1/users/42"
        assert recorder.requests[0].method == "GET"
        assert recorder.requests[0].headers["accept"] == "application/json"

    def test_absolute_url_is_used_as_is(self) -> None:
        recorder = Recorder(lambda r: _json({"id": 1, "name": "Bo"}))
        api = _make_api(recorder)

        _run(api.request(User, url="https://other.example.com/me"))

        assert str(recorder.requests[0].url) == "https://other.example.com/me"

    def test_query_params_drop_none(self) -> None:
        recorder = Recorder(lambda r: _json([]))
        api = _make_api(recorder)

        _run(api.request_list(User, url="users", query_params={"page": 2, "q": None}))

        assert recorder.requests[0].url.params["page"] == "2"
        assert "q" not in recorder.requests[0].url.params

    def test_body_params_encoded_as_json(self) -> None:
        recorder = Recorder(lambda r: _json({"id": 7, "name": "Cy"}, status_code=201))
        api = _make_api(recorder)

        _run(api.request(
            User, HTTPMethod.POST, url="users", body_params={"name": "Cy", "email": None}
        ))

        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert json.loads(sent.content) == {"name": "Cy"}
        assert sent.headers["content-type"] == "application/json"

    def test_model_body_encoded_by_encoder(self) -> None:
        recorder = Recorder(lambda r: _json({"id": 8, "name": "Di"}))
        api = _make_api(recorder)

        _run(api.request(User, "PUT", url="users/8", body=NewUser(name="Di")))

        assert json.loads(recorder.requests[0].content) == {"name": "Di", "email": None}

    def test_caller_headers_override_defaults(self) -> None:
        recorder = Recorder(lambda r: _json({"id": 1, "name": "A"}))
        api = _make_api(recorder)

        _run(api.request(User, url="users/1", headers={"Accept": "application/vnd.api+json", "X-Skip": None}))

        assert recorder.requests[0].headers["accept"] == "application/vnd.api+json"
        assert "x-skip" not in recorder.requests[0].headers

    def test_decode_mismatch_raises_decode_error(self) -> None:
        api = _make_api(Recorder(lambda r: _json({"id": "not-a-number"})))

        with pytest.raises(DecodeError) as exc_info:
            _run(api.request(User, url="users/1"))
        assert json.loads(exc_info.value.body) == {"id": "not-a-number"}

    def test_http_error_carries_status(self) -> None:
        api = _make_api(Recorder(lambda r: _json({"message": "gone"}, status_code=404)))

        with pytest.raises(HTTPError) as exc_info:
            _run(api.request(User, url="users/404"))
        assert exc_info.value.status_code == 404
        assert exc_info.value.exit_code == 4

    def test_build_error_never_reaches_network(self) -> None:
        recorder = Recorder(lambda r: _json({}))
        api = _make_api(recorder)

        with pytest.raises(RequestBuildError):
            _run(api.request(User, url="users", body_params={"a": 1}, body=NewUser(name="x")))
        assert recorder.requests == []


class TestRequestList:
    def test_decodes_array_in_order(self) -> None:
        api = _make_api(Recorder(lambda r: _json([{"id": 1, "name": "A"}, {"id": 2, "name": "B"}])))

        users = _run(api.request_list(User, url="users"))

        assert [u.id for u in users] == [1, 2]

    def test_empty_array(self) -> None:
        api = _make_api(Recorder(lambda r: _json([])))

        assert _run(api.request_list(User, url="users")) == []

    def test_object_body_is_not_an_array(self) -> None:
        api = _make_api(Recorder(lambda r: _json({"items": []})))

        with pytest.raises(DecodeError, match="expected array"):
            _run(api.request_list(User, url="users"))

    def test_bad_element_reports_index(self) -> None:
        api = _make_api(Recorder(lambda r: _json([{"id": 1, "name": "A"}, {"id": "x"}])))

        with pytest.raises(DecodeError, match="element 1"):
            _run(api.request_list(User, url="users"))


class TestRequestVoid:
    def test_delete_with_204(self) -> None:
        recorder = Recorder(lambda r: httpx.Response(204))
        api = _make_api(recorder)

        assert _run(api.request_void(HTTPMethod.DELETE, url="items/1")) is None
        assert recorder.requests[0].method == "DELETE"

    def test_body_is_ignored(self) -> None:
        api = _make_api(Recorder(lambda r: httpx.Response(200, content=b"<html>not json</html>")))

        assert _run(api.request_void("POST", url="ping")) is None

    def test_error_status_still_raises(self) -> None:
        api = _make_api(Recorder(lambda r: httpx.Response(500)))

        with pytest.raises(HTTPError) as exc_info:
            _run(api.request_void(HTTPMethod.DELETE, url="items/1"))
        assert exc_info.value.exit_code == 5


# ---------------------------------------------------------------------------
# Configuration surface
# ---------------------------------------------------------------------------


class TestConfiguration:
    def test_interceptor_added_after_construction_applies(self) -> None:
        recorder = Recorder(lambda r: _json({"id": 1, "name": "A"}))
        api = _make_api(recorder)
        api.request_interceptors.add(lambda r: r.with_header("X-Trace", "abc"))

        _run(api.request(User, url="users/1"))

        assert recorder.requests[0].headers["x-trace"] == "abc"

    def test_authenticator_recovers_from_401(self) -> None:
        def route(request: httpx.Request) -> httpx.Response:
            if request.headers.get("authorization") == "Bearer fresh":
                return _json({})
            return httpx.Response(401)

        async def login() -> str:
            return "fresh"

        recorder = Recorder(route)
        authenticator = BearerTokenAuthenticator(refresh=login)
        api = _make_api(recorder)
        api.authenticator = authenticator
        api.request_interceptors.add(authenticator.interceptor)

        assert _run(api.request(dict, HTTPMethod.POST, url="orders", body_params={"sku": "A1"})) == {}
        assert len(recorder.requests) == 2
        assert json.loads(recorder.requests[1].content) == {"sku": "A1"}

    def test_cache_policy_serves_repeat_get_from_cache(self, tmp_path: Path) -> None:
        recorder = Recorder(lambda r: _json({"id": 42, "name": "Ann"}))
        cache = ResponseCache(tmp_path, CacheConfig(ttl_seconds=60))
        api = _make_api(recorder, cache=cache, cache_policy=DefaultCachePolicy())

        first = _run(api.request(User, url="users/42"))
        second = _run(api.request(User, url="users/42"))

        assert first == second
        assert len(recorder.requests) == 1
        cache.close()

    def test_cache_hit_keeps_original_expiry(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        recorder = Recorder(
            lambda r: _json({"n": 1}, headers={"Cache-Control": "max-age=2"})
        )
        cache = ResponseCache(tmp_path, CacheConfig(ttl_seconds=60))
        api = _make_api(recorder, cache=cache, cache_policy=DefaultCachePolicy())
        writes: list[int] = []
        original_store = cache.store

        def counting_store(entry) -> None:
            writes.append(entry.ttl_seconds)
            original_store(entry)

        monkeypatch.setattr(cache, "store", counting_store)

        for _ in range(3):
            assert _run(api.request(dict, url="counter")) == {"n": 1}

        assert len(recorder.requests) == 1
        assert writes == [2]
        cache.close()

    def test_cache_policy_can_be_removed(self, tmp_path: Path) -> None:
        recorder = Recorder(lambda r: _json({"id": 42, "name": "Ann"}))
        cache = ResponseCache(tmp_path, CacheConfig(ttl_seconds=60))
        api = _make_api(recorder, cache=cache, cache_policy=DefaultCachePolicy())
        api.cache_policy = None

        _run(api.request(User, url="users/42"))
        _run(api.request(User, url="users/42"))

        assert len(recorder.requests) == 2
        cache.close()

    def test_absolute_url_joins_single_slash(self) -> None:
        api = _make_api(Recorder(lambda r: _json({})))

        assert api.absolute_url("/users") == "https://api.example.com/v1/users"
        assert api.absolute_url("users") == "https://api.example.com/v1/users"


# ---------------------------------------------------------------------------
# Profile wiring
# ---------------------------------------------------------------------------


class TestFromProfile:
    def test_installs_profile_headers_and_api_key(
        self, sample_profile: Profile, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TEST_API_KEY", "secret")
        api = JSONReactiveAPI.from_profile(sample_profile)

        request = api.request_interceptors.apply(api.build_request(url="pets"))

        assert request.url == "http://localhost:8080/pets"
        assert request.header("X-Client") == "tests"
        assert request.header("X-API-Key") == "secret"
        assert api.authenticator is None
        assert api.cache_policy is None
        _run(api.aclose())

    def test_enabled_cache_installs_default_policy(self, tmp_path: Path) -> None:
        profile = Profile(name="p", base_url="https://api.example.com")
        cache = ResponseCache(tmp_path, CacheConfig())

        api = JSONReactiveAPI.from_profile(profile, cache=cache)

        assert isinstance(api.cache_policy, DefaultCachePolicy)
        assert api.transport.cache is cache
        _run(api.aclose())
        cache.close()

    def test_oauth2_profile_installs_authenticator(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CID", "client")
        monkeypatch.setenv("CSECRET", "secret")
        profile = Profile(
            name="p",
            base_url="https://api.example.com",
            auth=AuthConfig(
                type="oauth2_client_credentials",
                token_url="https://auth.example.com/token",
                client_id_source="env:CID",
                client_secret_source="env:CSECRET",
            ),
        )

        api = JSONReactiveAPI.from_profile(profile)

        assert api.authenticator is not None
        assert len(api.request_interceptors) == 1
        _run(api.aclose())

    def test_unknown_auth_type(self) -> None:
        profile = Profile(name="p", base_url="https://x.example.com", auth=AuthConfig(type="kerberos"))

        with pytest.raises(AuthError, match="kerberos"):
            JSONReactiveAPI.from_profile(profile)
