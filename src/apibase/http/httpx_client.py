# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed JsonApi implementation."""

from __future__ import annotations

import asyncio
import json
import logging
import ssl as ssl_module
import time
from typing import Any

import httpx

from ..config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, ClientSettings
from ..errors import ParseError, RequestTimeoutError, SerializationError, TransportError, wrap_exception
from .client import JsonApi
from .headers import default_headers, merge_headers
from .models import ClientConfig, RequestOptions, Response
from .url import build_url

logger = logging.getLogger(__name__)


def build_ssl_context(allow_insecure_tls: bool) -> ssl_module.SSLContext:
    """TLS context for the agent; insecure mode accepts self-signed and mismatched certificates."""
    context = ssl_module.create_default_context()
    if allow_insecure_tls:
        context.check_hostname = False
        context.verify_mode = ssl_module.CERT_NONE
    return context


def build_limits(keep_alive: bool) -> httpx.Limits:
    """Pool limits for the agent; disabling keep-alive leaves no idle connections in the pool."""
    if keep_alive:
        return httpx.Limits()
    return httpx.Limits(max_keepalive_connections=0)


class HTTPClient(JsonApi):
    """
    Asynchronous JSON-over-HTTP/S client for building API bindings.

    The connection settings are captured once in an immutable ClientConfig and a
    single httpx.AsyncClient is shared by every call, so connections are reused
    according to the keep-alive policy. Each verb issues one independent request:
    the body is JSON-encoded, the call is bounded by a per-call timeout and the
    response body is JSON-decoded whatever the status code.

    Any number of calls may be in flight concurrently; each one owns its own timer.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        ssl: bool = False,
        timeout: int = DEFAULT_TIMEOUT_MS,
        keep_alive: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        api_key: str | None = None,
        *,
        allow_insecure_tls: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        :param host: the host name/ip to place calls against
        :param port: the port of the host to connect to
        :param ssl: whether to use TLS
        :param timeout: the default request timeout in milliseconds
        :param keep_alive: whether connections are kept open between calls
        :param user_agent: the User-Agent sent to the server
        :param api_key: value for the X-API-KEY header; omitted when empty
        :param allow_insecure_tls: skip certificate verification when ssl is enabled
        :param transport: custom httpx transport, mainly for tests
        """
        self._config = ClientConfig(
            host=host,
            port=port,
            ssl=ssl,
            timeout=timeout,
            keep_alive=keep_alive,
            user_agent=user_agent,
            api_key=api_key or None,
            allow_insecure_tls=allow_insecure_tls,
        )
        self._limits = build_limits(keep_alive)
        self._ssl_context = build_ssl_context(allow_insecure_tls) if ssl else None
        if self._ssl_context is not None and allow_insecure_tls:
            logger.warning("TLS certificate verification is disabled for %s:%s", host, port)

        self._client = httpx.AsyncClient(
            verify=self._ssl_context if self._ssl_context is not None else True,
            limits=self._limits,
            timeout=None,
            follow_redirects=True,
            headers=None if keep_alive else {"Connection": "close"},
            transport=transport,
        )
        logger.debug("HTTPClient configured: %s", self._config.describe())

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> HTTPClient:
        """Build a client that reproduces an existing ClientConfig."""
        return cls(
            config.host,
            config.port,
            config.ssl,
            config.timeout,
            config.keep_alive,
            config.user_agent,
            config.api_key,
            allow_insecure_tls=config.allow_insecure_tls,
            **kwargs,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs: Any) -> HTTPClient:
        """Build a client from environment-backed ClientSettings."""
        return cls.from_config(ClientConfig.from_settings(settings), **kwargs)

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.protocol}://{self.host}:{self.port})"

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def timeout(self) -> int:
        """The default request timeout in milliseconds."""
        return self._config.timeout

    @property
    def user_agent(self) -> str:
        return self._config.user_agent

    @property
    def protocol(self) -> str:
        return self._config.protocol

    @property
    def agent(self) -> httpx.AsyncClient:
        """The pooled httpx client shared by every call."""
        return self._client

    @property
    def ssl(self) -> bool:
        return self._config.ssl

    @property
    def ssl_context(self) -> ssl_module.SSLContext | None:
        return self._ssl_context

    @property
    def allow_insecure_tls(self) -> bool:
        return self._config.allow_insecure_tls

    @property
    def limits(self) -> httpx.Limits:
        return self._limits

    @property
    def api_key(self) -> str | None:
        return self._config.api_key

    @property
    def keep_alive(self) -> bool:
        return self._config.keep_alive

    @property
    def headers(self) -> list[tuple[str, str]]:
        """The base headers included in every request."""
        return default_headers(self.user_agent, self.api_key)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def url(self, endpoint: str) -> str:
        """Create the full URL for an endpoint on the configured host."""
        return build_url(self.protocol, self.host, self.port, endpoint)

    async def get(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]:
        return await self._request("GET", endpoint, None, options)

    async def delete(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]:
        return await self._request("DELETE", endpoint, None, options)

    async def post(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        """
        Send `body` as JSON. Only `None` means "no body"; `{}`, `[]`, `0`, `False` and `""`
        are serialized and sent. A body json.dumps cannot encode raises SerializationError
        before anything goes on the wire.
        """
        return await self._request("POST", endpoint, body, options)

    async def put(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        """Same body rules as post()."""
        return await self._request("PUT", endpoint, body, options)

    async def patch(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        """Same body rules as post()."""
        return await self._request("PATCH", endpoint, body, options)

    async def _request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        options: RequestOptions | None = None,
    ) -> Response[Any]:
        url = self.url(endpoint)
        # A zero or missing override falls back to the client default.
        override_ms = options.timeout if options is not None else None
        timeout_ms = override_ms or self.timeout
        timeout_seconds = override_ms / 1000.0 if override_ms else self._config.timeout_seconds
        headers = merge_headers(self.headers, options.headers if options is not None else None)
        try:
            content = json.dumps(body) if body is not None else None
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"{method} {url}: request body is not JSON serializable ({exc})",
                method=method,
                url=url,
            ) from exc

        if self._client.is_closed:
            raise TransportError(f"{method} {url}: client has been closed", method=method, url=url)

        logger.debug("%s %s (timeout=%sms)", method, url, timeout_ms)
        started = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.request(method, url, headers=headers, content=content),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.debug("%s %s timed out after %sms", method, url, timeout_ms)
            raise RequestTimeoutError(
                f"{method} {url} timed out after {timeout_ms}ms",
                method=method,
                url=url,
            ) from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            raise wrap_exception(exc, method=method, url=url) from exc

        elapsed_ms = (time.monotonic() - started) * 1000.0
        logger.debug("%s %s -> %s in %.1fms", method, url, response.status_code, elapsed_ms)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(
                f"{method} {url}: response body is not valid JSON ({exc})",
                method=method,
                url=url,
                status_code=response.status_code,
                text=response.text,
            ) from exc

        return Response(
            status_code=response.status_code,
            status_text=response.reason_phrase,
            body=payload,
        )

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["HTTPClient", "build_limits", "build_ssl_context"]
