# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by HTTPClient and bindings."""

from __future__ import annotations


def normalize_endpoint(endpoint: str) -> str:
    """Return the endpoint as a root-relative path (exactly one leading `/` added when missing)."""
    raw = str(endpoint)
    if raw.startswith("/"):
        return raw
    return f"/{raw}"


def build_url(protocol: str, host: str, port: int, endpoint: str) -> str:
    """
    Compose `<protocol>://<host>:<port><path>`.

    No escaping is performed; endpoints must already be well-formed path fragments
    (query strings included).
    """
    return f"{protocol}://{host}:{port}{normalize_endpoint(endpoint)}"


__all__ = ["build_url", "normalize_endpoint"]
