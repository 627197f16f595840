# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header assembly for JSON API calls.

Headers are kept as an ordered list of name/value pairs rather than a dict so a
per-call header that shares its name with a default is sent as an additional
value instead of replacing it.
"""

from __future__ import annotations

from collections.abc import Iterable

import httpx

from .models import Header

JSON_MEDIA_TYPE = "application/json"
API_KEY_HEADER = "X-API-KEY"


def default_headers(user_agent: str, api_key: str | None = None) -> list[tuple[str, str]]:
    """Return the headers included in every request, in wire order."""
    headers = [
        ("Accept", JSON_MEDIA_TYPE),
        ("Content-Type", JSON_MEDIA_TYPE),
        ("User-Agent", user_agent),
    ]
    if api_key:
        headers.append((API_KEY_HEADER, api_key))
    return headers


def merge_headers(base: Iterable[tuple[str, str]], extra: Iterable[Header] | None = None) -> httpx.Headers:
    """Append per-call headers after the defaults without replacing any value."""
    items = list(base)
    for header in extra or ():
        items.append(header.as_tuple())
    return httpx.Headers(items)


__all__ = ["API_KEY_HEADER", "JSON_MEDIA_TYPE", "default_headers", "merge_headers"]
