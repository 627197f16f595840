# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Base class for concrete API bindings."""

from __future__ import annotations

from typing import Any, TypeVar

from .http.client import JsonApi
from .http.models import RequestOptions, Response

BindingT = TypeVar("BindingT", bound="ApiBinding")


class ApiBinding:
    """
    Holds a JsonApi and exposes the verb helpers to subclasses.

    Subclasses add typed endpoint methods on top of `_get`/`_post`/... and never
    touch the transport directly, so any JsonApi (an HTTPClient, a StubJsonApi in
    tests) can back a binding.
    """

    def __init__(self, http: JsonApi):
        self._http = http

    @classmethod
    def connect(cls: type[BindingT], *args: Any, **kwargs: Any) -> BindingT:
        """Build the binding over a new HTTPClient constructed with the given arguments."""
        from .http.httpx_client import HTTPClient

        return cls(HTTPClient(*args, **kwargs))

    @property
    def http(self) -> JsonApi:
        return self._http

    async def __aenter__(self: BindingT) -> BindingT:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]:
        return await self._http.get(endpoint, options)

    async def _delete(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]:
        return await self._http.delete(endpoint, options)

    async def _post(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        return await self._http.post(endpoint, body, options)

    async def _put(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        return await self._http.put(endpoint, body, options)

    async def _patch(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]:
        return await self._http.patch(endpoint, body, options)


__all__ = ["ApiBinding"]
