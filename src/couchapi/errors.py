# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers.

Argument errors are plain ``TypeError`` raised before any I/O happens. Everything that goes
wrong on the wire (connection failures, redirect loops, non-2xx responses, undecodable bodies)
is a ``CouchError`` subclass.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from enum import Enum
from http import HTTPStatus
from typing import Any

GENERIC_HTTP_ERROR_NAME = "HTTP Error"


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, TransportError):
        return exc.category

    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(
        exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)
    ):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def status_name(status_code: Any) -> str:
    """Registered reason phrase for a status code, or the generic label."""
    try:
        return HTTPStatus(int(status_code)).phrase
    except (TypeError, ValueError):
        return GENERIC_HTTP_ERROR_NAME


def parse_couch_error(body: Any) -> tuple[str, Any]:
    """
    Turn an error response body into ``(message, json)``.

    CouchDB answers errors with ``{"error": "not_found", "reason": "missing"}``; those become
    ``"not found: missing"``. Anything else keeps the raw text as the message. The parsed JSON
    (or None) is returned either way.
    """
    message = "" if body is None else str(body)
    parsed: Any = None
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        parsed = None

    if isinstance(parsed, Mapping) and isinstance(parsed.get("error"), str):
        message = parsed["error"].replace("_", " ")
        reason = parsed.get("reason")
        if isinstance(reason, str):
            message += ": " + reason.replace("_", " ")

    return message, parsed


class CouchError(Exception):
    """Base class for every failure reported by a request."""


class ConfigError(CouchError, ValueError):
    """The client was configured with a URL or headers it cannot use."""


class TransportError(CouchError):
    """The request never produced a response (refused, reset, DNS, TLS, timeout)."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR):
        super().__init__(message)
        self.category = category

    @classmethod
    def from_exception(cls, exc: BaseException) -> TransportError:
        return cls(str(exc) or type(exc).__name__, categorize_exception(exc))

    @property
    def reason(self) -> str:
        return error_category_to_reason(self.category)


class RedirectError(CouchError):
    """Redirect hop ceiling exceeded."""


class ResponseClosedError(CouchError):
    """The response stream broke before it ended; ``body`` holds what was buffered."""

    def __init__(self, message: str, body: bytes | None = None, headers: Mapping[str, str] | None = None):
        super().__init__(message)
        self.body = body
        self.headers = dict(headers or {})


class DecodeError(CouchError):
    """A response body that should have been JSON could not be decoded."""

    def __init__(self, message: str, text: str | None = None):
        super().__init__(message)
        self.text = text


class HttpError(CouchError):
    """
    Terminal response with a status code >= 300.

    ``code`` is the numeric status (NaN if unparsable), ``name`` the reason phrase,
    ``message`` the formatted CouchDB error or the raw body text and ``json`` the parsed
    error body when there was one. ``body`` and ``headers`` keep the raw response.
    """

    def __init__(
        self,
        message: Any = None,
        status_code: Any = None,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ):
        text, parsed = parse_couch_error(message)
        super().__init__(text)
        self.message = text
        try:
            self.code: int | float = int(status_code)
        except (TypeError, ValueError):
            self.code = math.nan
        self.name = status_name(status_code)
        self.json = parsed
        self.body = body
        self.headers = dict(headers or {})

    def __repr__(self) -> str:
        return f"HttpError({self.code!r}, {self.name!r}, {self.message!r})"


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout talking to the database",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error talking to the database",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


__all__ = [
    "ConfigError",
    "CouchError",
    "DecodeError",
    "ErrorCategory",
    "GENERIC_HTTP_ERROR_NAME",
    "HttpError",
    "RedirectError",
    "ResponseClosedError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
    "parse_couch_error",
    "status_name",
]
