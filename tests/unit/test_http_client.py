# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import datetime
import json
import logging
import ssl
import time

import httpx
import pytest

from apibase.config import DEFAULT_USER_AGENT, ClientSettings
from apibase.errors import (
    ErrorCategory,
    HttpClientError,
    ParseError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
)
from apibase.http.httpx_client import HTTPClient
from apibase.http.models import ClientConfig, Header, RequestOptions, Response


def make_client(handler, *args, **kwargs) -> HTTPClient:
    return HTTPClient(*args, transport=httpx.MockTransport(handler), **kwargs)


def test_defaults_match_documented_values():
    client = HTTPClient()
    assert client.host == "127.0.0.1"
    assert client.port == 80
    assert client.ssl is False
    assert client.protocol == "http"
    assert client.timeout == 2000
    assert client.keep_alive is True
    assert client.user_agent == DEFAULT_USER_AGENT
    assert client.api_key is None
    assert client.ssl_context is None
    assert isinstance(client.agent, httpx.AsyncClient)


def test_config_is_read_only():
    client = HTTPClient("api.local", 8080)
    with pytest.raises(AttributeError):
        client.config.host = "other"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        client.host = "other"  # type: ignore[misc]
    assert client.host == "api.local"


def test_url_inserts_single_separator():
    client = HTTPClient("api.local", 8080)
    assert client.url("status") == "http://api.local:8080/status"
    assert client.url("/status") == "http://api.local:8080/status"
    assert client.url("v1/items?limit=5") == "http://api.local:8080/v1/items?limit=5"


def test_tls_accepts_self_signed_certificates_by_default():
    client = HTTPClient("example.test", 443, True)
    assert client.protocol == "https"
    assert client.allow_insecure_tls is True
    assert client.ssl_context is not None
    assert client.ssl_context.verify_mode == ssl.CERT_NONE
    assert client.ssl_context.check_hostname is False

    pool_context = client.agent._transport._pool._ssl_context
    assert pool_context is client.ssl_context
    assert pool_context.verify_mode == ssl.CERT_NONE


def test_tls_verification_can_be_enabled_explicitly():
    client = HTTPClient("example.test", 443, True, allow_insecure_tls=False)
    assert client.ssl_context is not None
    assert client.ssl_context.verify_mode == ssl.CERT_REQUIRED
    assert client.ssl_context.check_hostname is True
    assert client.agent._transport._pool._ssl_context is client.ssl_context


def test_insecure_tls_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="apibase.http.httpx_client"):
        HTTPClient("example.test", 443, True)
    assert any("verification is disabled" in record.getMessage() for record in caplog.records)


def test_keep_alive_controls_pool_limits():
    assert HTTPClient(keep_alive=True).limits.max_keepalive_connections != 0
    assert HTTPClient(keep_alive=False).limits.max_keepalive_connections == 0


def test_empty_api_key_is_treated_as_absent():
    client = HTTPClient(api_key="")
    assert client.api_key is None
    assert all(name != "X-API-KEY" for name, _ in client.headers)


def test_from_settings_uses_all_fields():
    settings = ClientSettings(
        host="svc.internal",
        port=8443,
        ssl=True,
        timeout=750,
        keep_alive=False,
        user_agent="Binding/2.0",
        api_key="secret",
        allow_insecure_tls=False,
    )
    client = HTTPClient.from_settings(settings)
    assert client.url("/x") == "https://svc.internal:8443/x"
    assert client.timeout == 750
    assert client.keep_alive is False
    assert client.user_agent == "Binding/2.0"
    assert client.api_key == "secret"
    assert client.ssl_context.verify_mode == ssl.CERT_REQUIRED


@pytest.mark.asyncio
async def test_get_status_scenario():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async with make_client(handler, "example.test", 443, True) as client:
        response = await client.get("/status")

    assert response == Response(status_code=200, status_text="OK", body={"ok": True})
    assert seen[0].method == "GET"
    assert seen[0].url.scheme == "https"
    assert seen[0].url.host == "example.test"
    assert seen[0].url.path == "/status"
    assert seen[0].content == b""


@pytest.mark.asyncio
async def test_default_headers_are_sent():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["headers"] = request.headers
        return httpx.Response(200, json={})

    async with make_client(handler, user_agent="Binding/1.0") as client:
        await client.get("items")

    headers = captured["headers"]
    assert headers.get_list("Accept") == ["application/json"]
    assert headers["Content-Type"] == "application/json"
    assert headers["User-Agent"] == "Binding/1.0"
    assert "X-API-KEY" not in headers


@pytest.mark.asyncio
async def test_api_key_header_on_every_request():
    keys = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers.get("X-API-KEY"))
        return httpx.Response(200, json={})

    async with make_client(handler, api_key="k-123") as client:
        await client.get("/a")
        await client.post("/b", {"x": 1})
        await client.delete("/c")

    assert keys == ["k-123", "k-123", "k-123"]


@pytest.mark.asyncio
async def test_per_call_headers_are_appended_not_replaced():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["headers"] = request.headers
        return httpx.Response(200, json={})

    options = RequestOptions(headers=[Header("Accept", "text/plain"), Header("X-Trace", "1"), Header("X-Trace", "2")])
    async with make_client(handler) as client:
        await client.get("/a", options)

    headers = captured["headers"]
    assert headers.get_list("Accept") == ["application/json", "text/plain"]
    assert headers.get_list("X-Trace") == ["1", "2"]


@pytest.mark.asyncio
async def test_keep_alive_disabled_requests_connection_close():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["connection"] = request.headers.get("Connection")
        return httpx.Response(200, json={})

    async with make_client(handler, keep_alive=False) as client:
        await client.get("/a")

    assert captured["connection"] == "close"


@pytest.mark.asyncio
async def test_post_body_round_trips_as_json():
    original = {"name": "widget", "tags": ["a", "b"], "price": 9.5, "meta": {"nested": None, "flag": True}}
    received = {}

    def handler(request: httpx.Request) -> httpx.Response:
        received["method"] = request.method
        received["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": 7})

    async with make_client(handler) as client:
        response = await client.post("/widgets", original)

    assert received["method"] == "POST"
    assert received["body"] == original
    assert response.status_code == 201
    assert response.status_text == "Created"
    assert response.body == {"id": 7}


@pytest.mark.asyncio
async def test_put_and_patch_send_bodies_and_empty_containers():
    received = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append((request.method, request.content))
        return httpx.Response(200, json={})

    async with make_client(handler) as client:
        await client.put("/a", [1, 2])
        await client.patch("/a", {})
        await client.patch("/a")

    assert received == [("PUT", b"[1, 2]"), ("PATCH", b"{}"), ("PATCH", b"")]


@pytest.mark.asyncio
async def test_error_status_is_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "missing"})

    async with make_client(handler) as client:
        response = await client.get("/nope")

    assert response.status_code == 404
    assert response.status_text == "Not Found"
    assert response.body == {"error": "missing"}
    assert response.ok is False


@pytest.mark.asyncio
async def test_non_json_body_raises_parse_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    async with make_client(handler) as client:
        with pytest.raises(ParseError) as excinfo:
            await client.get("/broken")

    err = excinfo.value
    assert err.status_code == 502
    assert "bad gateway" in err.text
    assert err.category is ErrorCategory.PARSE_ERROR
    assert err.method == "GET"
    assert err.url == "http://127.0.0.1:80/broken"


@pytest.mark.asyncio
async def test_empty_body_raises_parse_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    async with make_client(handler) as client:
        with pytest.raises(ParseError):
            await client.delete("/thing")


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(TransportError) as excinfo:
            await client.get("/a")

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert excinfo.value.category is ErrorCategory.CONNECTION_ERROR


@pytest.mark.asyncio
async def test_dropped_connection_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.RemoteProtocolError("Server disconnected without sending a response.", request=request)

    async with make_client(handler) as client:
        with pytest.raises(TransportError) as excinfo:
            await client.post("/a", {"x": 1})

    assert excinfo.value.method == "POST"
    assert excinfo.value.url == "http://127.0.0.1:80/a"


@pytest.mark.asyncio
async def test_closed_client_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        return httpx.Response(200, json={})

    client = make_client(handler)
    await client.aclose()
    assert client.is_closed
    with pytest.raises(TransportError):
        await client.get("/a")


@pytest.mark.asyncio
async def test_default_timeout_aborts_slow_request_without_side_effects():
    calls = {"count": 0}
    cancelled = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200, json={})  # pragma: no cover

    client = make_client(handler, timeout=50)
    started = time.monotonic()
    with pytest.raises(RequestTimeoutError) as excinfo:
        await client.get("/hang")
    elapsed = time.monotonic() - started

    assert 0.04 <= elapsed < 0.5
    assert isinstance(excinfo.value, TimeoutError)
    assert isinstance(excinfo.value, HttpClientError)
    assert excinfo.value.category is ErrorCategory.TIMEOUT

    await asyncio.sleep(0.1)
    assert cancelled.is_set()
    assert calls["count"] == 1
    await client.aclose()


@pytest.mark.asyncio
async def test_response_before_timeout_succeeds():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.01)
        return httpx.Response(200, json={"ok": True})

    async with make_client(handler, timeout=500) as client:
        response = await client.get("/fast")

    assert response.body == {"ok": True}


@pytest.mark.asyncio
async def test_per_call_timeout_overrides_default():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.2)
        return httpx.Response(200, json={"ok": True})

    async with make_client(handler, timeout=20) as client:
        response = await client.get("/slow", RequestOptions(timeout=2000))
        assert response.body == {"ok": True}

        with pytest.raises(RequestTimeoutError):
            await client.get("/slow", RequestOptions(timeout=0))


@pytest.mark.asyncio
async def test_concurrent_calls_time_out_independently():
    async def handler(request: httpx.Request) -> httpx.Response:
        delay = float(request.url.params["delay"])
        await asyncio.sleep(delay)
        return httpx.Response(200, json={"delay": delay})

    async with make_client(handler, timeout=1000) as client:
        results = await asyncio.gather(
            client.get("/d?delay=0.05"),
            client.get("/d?delay=0.5", RequestOptions(timeout=50)),
            client.get("/d?delay=0.01"),
            return_exceptions=True,
        )

    assert results[0].body == {"delay": 0.05}
    assert isinstance(results[1], RequestTimeoutError)
    assert results[2].body == {"delay": 0.01}


def test_from_config_reproduces_configuration():
    original = HTTPClient("svc.internal", 8443, True, 900, False, "Binding/3.0", "k", allow_insecure_tls=False)
    copy = HTTPClient.from_config(original.config)
    assert copy.config == original.config
    assert copy.config is not original.config
    assert isinstance(copy.config, ClientConfig)


@pytest.mark.asyncio
async def test_unserializable_body_raises_before_sending():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        calls.append(request)
        return httpx.Response(200, json={})

    async with make_client(handler) as client:
        with pytest.raises(SerializationError) as excinfo:
            await client.post("/events", {"when": datetime.datetime.now()})

    err = excinfo.value
    assert isinstance(err, HttpClientError)
    assert isinstance(err, TypeError)
    assert err.category is ErrorCategory.SERIALIZATION_ERROR
    assert err.method == "POST"
    assert err.url == "http://127.0.0.1:80/events"
    assert isinstance(err.__cause__, TypeError)
    assert calls == []


@pytest.mark.asyncio
async def test_falsy_bodies_are_sent():
    received = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(request.content)
        return httpx.Response(200, json={})

    async with make_client(handler) as client:
        await client.post("/a", 0)
        await client.put("/a", False)
        await client.patch("/a", "")

    assert received == [b"0", b"false", b'""']
