# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
apibase package entrypoint.

This package provides an asynchronous JSON-over-HTTP/S client that API bindings
build on: connection settings are configured once and verb helpers
(GET/POST/PUT/PATCH/DELETE) handle URL composition, default headers, per-call
timeouts and JSON encoding/decoding. Bindings depend on the small JsonApi
protocol rather than on a concrete transport.
"""

from .binding import ApiBinding
from .config import DEFAULT_USER_AGENT, ClientSettings, load_client_settings
from .errors import (
    ErrorCategory,
    HttpClientError,
    ParseError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
)
from .http import (
    ClientConfig,
    Header,
    HTTPClient,
    JsonApi,
    RequestOptions,
    Response,
    StubJsonApi,
    create_default_client,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "DEFAULT_USER_AGENT",
    "ApiBinding",
    "ClientConfig",
    "ClientSettings",
    "ErrorCategory",
    "HTTPClient",
    "Header",
    "HttpClientError",
    "JsonApi",
    "ParseError",
    "RequestOptions",
    "RequestTimeoutError",
    "Response",
    "SerializationError",
    "StubJsonApi",
    "TransportError",
    "create_default_client",
    "load_client_settings",
    "setup_logging",
    "__version__",
]
