# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON API client abstraction and factory."""

from typing import Any, Protocol

from ..config import ClientSettings, load_client_settings
from .models import RequestOptions, Response


class JsonApi(Protocol):
    """The five verb operations an API binding builds on."""

    async def get(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]: ...

    async def delete(self, endpoint: str, options: RequestOptions | None = None) -> Response[Any]: ...

    async def post(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]: ...

    async def put(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]: ...

    async def patch(self, endpoint: str, body: Any = None, options: RequestOptions | None = None) -> Response[Any]: ...

    async def aclose(self) -> None:  # pragma: no cover - optional for stubs
        ...


def create_default_client(settings: ClientSettings | None = None) -> JsonApi:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HTTPClient

    return HTTPClient.from_settings(settings or load_client_settings())
