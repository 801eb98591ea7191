# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
couchapi package entrypoint.

An asyncio client for the CouchDB HTTP API: request merging and body framing, bounded
redirect following, error classification and document operations with revision-based
optimistic concurrency. The transport is injectable; the default one is backed by httpx.
"""

from .api import CouchAPI
from .client import CouchClient
from .config import ClientSettings, load_client_settings
from .database import Database
from .design import DesignFunction, List, Show, Update, View
from .errors import (
    ConfigError,
    CouchError,
    DecodeError,
    ErrorCategory,
    HttpError,
    RedirectError,
    ResponseClosedError,
    TransportError,
)
from .http import (
    HttpxTransport,
    ReadResult,
    RequestOptions,
    ResourceIdentity,
    StubTransport,
    Transport,
    create_default_transport,
)
from .log import setup_logging
from .runtime import connect, create_api, open_database
from .server import Server
from .version import __version__

__all__ = [
    "ClientSettings",
    "ConfigError",
    "CouchAPI",
    "CouchClient",
    "CouchError",
    "Database",
    "DecodeError",
    "DesignFunction",
    "ErrorCategory",
    "HttpError",
    "HttpxTransport",
    "List",
    "ReadResult",
    "RedirectError",
    "RequestOptions",
    "ResourceIdentity",
    "ResponseClosedError",
    "Server",
    "Show",
    "StubTransport",
    "Transport",
    "TransportError",
    "Update",
    "View",
    "connect",
    "create_api",
    "create_default_transport",
    "load_client_settings",
    "open_database",
    "setup_logging",
    "__version__",
]
