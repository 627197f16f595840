# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request/response data models shared by HTTPClient and API bindings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ..config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, ClientSettings

T = TypeVar("T")


@dataclass(frozen=True)
class Header:
    """A single header name/value pair; the same name may appear more than once."""

    name: str
    value: str

    def as_tuple(self) -> tuple[str, str]:
        return (self.name, self.value)


@dataclass
class RequestOptions:
    """Per-call overrides: a timeout in milliseconds and extra headers to append."""

    timeout: int | None = None
    headers: list[Header] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        *,
        timeout: int | None = None,
        headers: Mapping[str, str] | Iterable[Header | tuple[str, str]] | None = None,
    ) -> RequestOptions:
        """Helper accepting a mapping or name/value pairs in place of Header objects."""
        collected: list[Header] = []
        if isinstance(headers, Mapping):
            collected = [Header(str(name), str(value)) for name, value in headers.items()]
        elif headers is not None:
            for item in headers:
                if isinstance(item, Header):
                    collected.append(item)
                else:
                    name, value = item
                    collected.append(Header(str(name), str(value)))
        return cls(timeout=timeout, headers=collected)


@dataclass
class Response(Generic[T]):
    """Status line and JSON-decoded body of a completed call."""

    status_code: int
    status_text: str
    body: T

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection configuration captured when an HTTPClient is built."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ssl: bool = False
    timeout: int = DEFAULT_TIMEOUT_MS
    keep_alive: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    api_key: str | None = None
    allow_insecure_tls: bool = True

    @property
    def protocol(self) -> str:
        return "https" if self.ssl else "http"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> ClientConfig:
        """Build a config from the environment-backed ClientSettings."""
        return cls(
            host=settings.host,
            port=settings.port,
            ssl=settings.ssl,
            timeout=settings.timeout,
            keep_alive=settings.keep_alive,
            user_agent=settings.user_agent,
            api_key=settings.api_key or None,
            allow_insecure_tls=settings.allow_insecure_tls,
        )

    def describe(self) -> dict[str, Any]:
        """Loggable view of the config with the API key masked."""
        return {
            "host": self.host,
            "port": self.port,
            "protocol": self.protocol,
            "timeout_ms": self.timeout,
            "keep_alive": self.keep_alive,
            "user_agent": self.user_agent,
            "api_key": "***" if self.api_key else None,
            "allow_insecure_tls": self.allow_insecure_tls,
        }


__all__ = ["ClientConfig", "Header", "RequestOptions", "Response"]
