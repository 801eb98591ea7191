# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Buffered CouchDB requests with redirect handling and error classification.

Every CouchAPI request ends in exactly one of:

- a result (``raw``: ReadResult, ``string``: text, ``json``: decoded value),
- an HttpError for a terminal status >= 300, carrying the raw body and headers,
- a RedirectError after too many redirect hops,
- a TransportError when no response arrived, or a ResponseClosedError when it broke off,
- a DecodeError (``json`` only) carrying the undecodable text.

The only exceptions raised for bad arguments are TypeErrors, before anything is sent.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from .client import CouchClient, Options
from .config import ClientSettings
from .errors import CouchError, DecodeError, RedirectError
from .http.identity import ResourceIdentity
from .http.merge import DEFAULT_METHOD
from .http.models import ReadResult, RequestOptions
from .http.reader import ResponseReader, read_response
from .http.redirect import MAX_REDIRECTS, RedirectDecider, redirect_location, should_redirect
from .http.transport import Transport

logger = logging.getLogger(__name__)


class CouchAPI(CouchClient):
    """
    CouchClient that buffers responses and follows redirects.

    The redirect decision and the response reader are injectable; the defaults follow 303 for
    every method and 301/302/307 for GET and HEAD, and raise HttpError for statuses >= 300.
    """

    def __init__(
        self,
        url: str | Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        settings: ClientSettings | None = None,
        identity: ResourceIdentity | None = None,
        redirect_decider: RedirectDecider = should_redirect,
        response_reader: ResponseReader = read_response,
    ):
        super().__init__(url, headers, transport=transport, settings=settings, identity=identity)
        self.redirect_decider = redirect_decider
        self.response_reader = response_reader

    def _spawn(self, identity: ResourceIdentity) -> CouchAPI:
        return CouchAPI(
            transport=self.transport,
            settings=self.settings,
            identity=identity,
            redirect_decider=self.redirect_decider,
            response_reader=self.response_reader,
        )

    async def raw(self, options: Options = None) -> ReadResult:
        """Send a request and return the buffered body with the lower-cased response headers."""
        opts = RequestOptions.coerce(options)
        identity = self.identity
        method = (opts.method or DEFAULT_METHOD).upper()

        while True:
            response = await self._send(identity, opts)
            location = redirect_location(method, response.status_code, response.headers, self.redirect_decider)
            if location is None:
                return await self.response_reader(response)

            await response.aclose()
            requested = identity.base_url + identity.get_path(opts.path) + identity.get_query(opts.query)
            identity = identity.redirected_to(location, requested)
            if identity.redirects > MAX_REDIRECTS:
                raise RedirectError("too many redirects")
            logger.debug("%s redirect %d to %s", response.status_code, identity.redirects, location)
            # same method, query and headers against the new location, never the body
            opts = RequestOptions(method=opts.method, query=opts.query, headers=opts.headers)

    async def exists(self, options: Options = None) -> bool:
        """HEAD the resource; False for any failure, including connection problems."""
        opts = RequestOptions.coerce(options)
        opts.method = "HEAD"
        try:
            await self.raw(opts)
        except CouchError as exc:
            logger.debug("HEAD %s failed: %s", self.identity.get_path(opts.path), exc)
            return False
        return True

    async def string(self, options: Options = None) -> str | None:
        """Like ``raw`` but decodes the body with ``options.encoding`` (UTF-8 by default)."""
        opts = RequestOptions.coerce(options)
        result = await self.raw(opts)
        if result.body is None:
            return None
        try:
            return result.body.decode(opts.encoding or "utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(str(exc)) from exc

    async def json(self, options: Options = None) -> Any:
        """Like ``string`` but decodes JSON; an empty body gives None."""
        text = await self.string(options)
        if text is None:
            return None
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError(str(exc), text) from exc


__all__ = ["CouchAPI"]
