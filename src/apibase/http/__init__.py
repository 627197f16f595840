# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import RecordedCall, StubJsonApi
from .client import JsonApi, create_default_client
from .headers import API_KEY_HEADER, JSON_MEDIA_TYPE, default_headers, merge_headers
from .httpx_client import HTTPClient
from .models import ClientConfig, Header, RequestOptions, Response
from .url import build_url, normalize_endpoint

__all__ = [
    "API_KEY_HEADER",
    "JSON_MEDIA_TYPE",
    "ClientConfig",
    "HTTPClient",
    "Header",
    "JsonApi",
    "RecordedCall",
    "RequestOptions",
    "Response",
    "StubJsonApi",
    "build_url",
    "create_default_client",
    "default_headers",
    "merge_headers",
    "normalize_endpoint",
]
