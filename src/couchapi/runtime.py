# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Factories wiring a shared transport and settings into the capability clients."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .api import CouchAPI
from .config import ClientSettings, load_client_settings
from .database import Database
from .http.reader import ResponseReader, read_response
from .http.redirect import RedirectDecider, should_redirect
from .http.transport import Transport, create_default_transport
from .server import Server


def create_api(
    url: str | None = None,
    headers: Mapping[str, Any] | None = None,
    *,
    transport: Transport | None = None,
    settings: ClientSettings | None = None,
    redirect_decider: RedirectDecider = should_redirect,
    response_reader: ResponseReader = read_response,
) -> CouchAPI:
    """
    Build a CouchAPI for ``url`` (the configured URL by default).

    Settings are loaded from the environment once and the transport is created from them
    unless one is injected; every client derived from the result shares that transport.
    """
    settings = settings or load_client_settings()
    return CouchAPI(
        url,
        headers,
        transport=transport or create_default_transport(settings),
        settings=settings,
        redirect_decider=redirect_decider,
        response_reader=response_reader,
    )


def connect(url: str | None = None, headers: Mapping[str, Any] | None = None, **kwargs: Any) -> Server:
    """Server client for ``url``; keyword arguments are passed to ``create_api``."""
    return Server(create_api(url, headers, **kwargs))


def open_database(url: str, headers: Mapping[str, Any] | None = None, **kwargs: Any) -> Database:
    """Database client for a full database URL such as ``http://localhost:5984/mydb``."""
    return Database(create_api(url, headers, **kwargs))


__all__ = ["connect", "create_api", "open_database"]
