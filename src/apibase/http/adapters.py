# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory JsonApi implementations for exercising API bindings without a network."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import TransportError
from .client import JsonApi
from .models import RequestOptions, Response
from .url import normalize_endpoint


@dataclass
class RecordedCall:
    method: str
    endpoint: str
    body: Any = None
    options: RequestOptions | None = None


class StubJsonApi(JsonApi):
    """Deterministic, programmable JsonApi for tests."""

    def __init__(self, responses: dict[tuple[str, str], Response[Any]] | None = None):
        self._responses: dict[tuple[str, str], Response[Any]] = {}
        for (method, endpoint), response in (responses or {}).items():
            self.add(method, endpoint, response)
        self.calls: list[RecordedCall] = []
        self.closed = False

    def add(self, method: str, endpoint: str, response: Response[Any]) -> None:
        self._responses[(method.upper(), normalize_endpoint(endpoint))] = response

    async def _respond(self, method: str, endpoint: str, body: Any, options: RequestOptions | None) -> Response[Any]:
        path = normalize_endpoint(endpoint)
        self.calls.append(RecordedCall(method=method, endpoint=path, body=body, options=options))
        key = (method, path)
        if key in self._responses:
            return self._responses[key]
        raise TransportError(f"No stubbed response configured for {method} {path}", method=method, url=path)

    async def get(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]:
        return await self._respond("GET", endpoint, None, options)

    async def delete(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]:
        return await self._respond("DELETE", endpoint, None, options)

    async def post(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        return await self._respond("POST", endpoint, body, options)

    async def put(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        return await self._respond("PUT", endpoint, body, options)

    async def patch(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        return await self._respond("PATCH", endpoint, body, options)

    async def aclose(self) -> None:
        self.closed = True


__all__ = ["RecordedCall", "StubJsonApi"]
