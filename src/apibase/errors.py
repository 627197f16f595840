# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import asyncio
import json
import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class HttpClientError(Exception):
    """Base class for every failure raised by an HTTPClient call."""

    default_category = ErrorCategory.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        category: ErrorCategory | None = None,
    ):
        super().__init__(message)
        self.method = method
        self.url = url
        self.category = category or self.default_category


class RequestTimeoutError(HttpClientError, TimeoutError):
    """The timeout elapsed before a response was received; the request was aborted."""

    default_category = ErrorCategory.TIMEOUT


class TransportError(HttpClientError):
    """The connection could not be established or was dropped mid-flight."""

    default_category = ErrorCategory.CONNECTION_ERROR


class ParseError(HttpClientError):
    """The response body could not be parsed as JSON."""

    default_category = ErrorCategory.PARSE_ERROR

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        text: str = "",
    ):
        super().__init__(message, method=method, url=url)
        self.status_code = status_code
        self.text = text


class SerializationError(HttpClientError, TypeError):
    """The request body could not be encoded as JSON; nothing was sent."""

    default_category = ErrorCategory.SERIALIZATION_ERROR


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, HttpClientError):
        return exc.category

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, json.JSONDecodeError):
        return ErrorCategory.PARSE_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    # httpx wraps the low-level cause; look through it before settling on a generic bucket.
    if isinstance(exc, httpx.TransportError):
        cause = exc.__context__ or exc.__cause__
        if cause is not None and not isinstance(cause, httpx.TransportError):
            nested = categorize_exception(cause)
            if nested not in {ErrorCategory.UNKNOWN_ERROR, ErrorCategory.TIMEOUT}:
                return nested
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Request timed out before a response was received",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.PARSE_ERROR: "Response body is not valid JSON",
        ErrorCategory.SERIALIZATION_ERROR: "Request body is not JSON serializable",
        ErrorCategory.UNKNOWN_ERROR: "Request failed due to network error",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


def wrap_exception(exc: BaseException, *, method: str | None = None, url: str | None = None) -> HttpClientError:
    """Convert a raw transport exception into the matching HttpClientError."""
    if isinstance(exc, HttpClientError):
        return exc

    category = categorize_exception(exc)
    detail = str(exc) or type(exc).__name__
    message = f"{error_category_to_reason(category)}: {detail}"
    if category is ErrorCategory.TIMEOUT:
        return RequestTimeoutError(message, method=method, url=url)
    if category is ErrorCategory.PARSE_ERROR:
        return ParseError(message, method=method, url=url)
    return TransportError(message, method=method, url=url, category=category)


__all__ = [
    "ErrorCategory",
    "HttpClientError",
    "ParseError",
    "RequestTimeoutError",
    "SerializationError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
    "wrap_exception",
]
