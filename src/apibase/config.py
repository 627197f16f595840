# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for apibase."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"apibase/{__version__}"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 80
DEFAULT_TIMEOUT_MS = 2000


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_str_env(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or None


@dataclass
class ClientSettings:
    """Connection defaults for an HTTPClient."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ssl: bool = False
    timeout: int = DEFAULT_TIMEOUT_MS
    keep_alive: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    api_key: str | None = None
    allow_insecure_tls: bool = True

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _int_env("APIBASE_TIMEOUT_MS", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        return cls(
            host=os.getenv("APIBASE_HOST", cls.host),
            port=_int_env("APIBASE_PORT", cls.port),
            ssl=_bool_env("APIBASE_SSL", cls.ssl),
            timeout=timeout,
            keep_alive=_bool_env("APIBASE_KEEP_ALIVE", cls.keep_alive),
            user_agent=os.getenv("APIBASE_USER_AGENT", cls.user_agent),
            api_key=_optional_str_env("APIBASE_API_KEY", cls.api_key),
            allow_insecure_tls=_bool_env("APIBASE_ALLOW_INSECURE_TLS", cls.allow_insecure_tls),
        )


def load_client_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()
