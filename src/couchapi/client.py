# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""General-purpose CouchDB request client.

CouchClient sends exactly one request per call and hands back the open response: no redirects
are followed and nothing is buffered. Most code wants CouchAPI (``couchapi.api``), which builds
on it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import ClientSettings, load_client_settings
from .http.cache import response_cacher
from .http.identity import ResourceIdentity
from .http.invoke import send_request
from .http.merge import build_request
from .http.models import RequestOptions
from .http.transport import Transport, TransportResponse, create_default_transport

Options = RequestOptions | Mapping[str, Any] | str | None


class CouchClient:
    """
    Client bound to one resource URL.

    ``url`` defaults to the configured URL (``http://localhost:5984``); a mapping passed as the
    first argument is taken as the default headers. Request options are merged onto the
    client's defaults: the path is appended to the client path, and query parameters and
    headers given per call win over the defaults.
    """

    def __init__(
        self,
        url: str | Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        settings: ClientSettings | None = None,
        identity: ResourceIdentity | None = None,
    ):
        if isinstance(url, Mapping):
            url, headers = None, url
        self.settings = settings or load_client_settings()
        self.transport = transport or create_default_transport(self.settings)
        if identity is None:
            identity = ResourceIdentity.from_url(
                url if url is not None else self.settings.url,
                headers,
                content_type=self.settings.content_type,
            )
        self.identity = identity

    def _spawn(self, identity: ResourceIdentity) -> CouchClient:
        return CouchClient(transport=self.transport, settings=self.settings, identity=identity)

    def set_url(self, url: str | None) -> CouchClient:
        """Point the client at ``url``, replacing host, path, query, headers and credentials."""
        self.identity = self.identity.with_url(url)
        return self

    def set_credentials(self, user: Any = None, password: Any = None) -> CouchClient:
        """Set (``"user"``, ``"user:pass"`` or user plus password) or, without arguments, clear credentials."""
        self.identity = self.identity.with_credentials(user, password)
        return self

    @property
    def url(self) -> str:
        return self.identity.url

    @property
    def base_url(self) -> str:
        return self.identity.base_url

    def get_path(self, extra: str | None = None) -> str:
        return self.identity.get_path(extra)

    def get_query(self, extra: Mapping[str, Any] | None = None) -> str:
        return self.identity.get_query(extra)

    def default_headers(self) -> dict[str, str]:
        return self.identity.default_headers()

    def resource(self, *segments: Any) -> CouchClient:
        """
        A client of the same kind for a sub-resource; segments are URL-encoded.

        ``client.resource("db", "doc id/x")`` addresses ``.../db/doc%20id%2Fx``.
        """
        return self._spawn(self.identity.resource(*segments))

    async def request(self, options: Options = None) -> TransportResponse:
        """
        Send one request and return the open response; the caller reads and closes it.

        Options may carry ``method``, ``path``, ``query``, ``headers`` and ``data``. POST and PUT
        bodies are framed and serialized by the body preparer.
        """
        return await self._send(self.identity, RequestOptions.coerce(options))

    async def _send(self, identity: ResourceIdentity, options: RequestOptions) -> TransportResponse:
        descriptor = build_request(identity, options)

        async def send() -> TransportResponse:
            return await send_request(self.transport, descriptor, timeout=self.settings.timeout)

        if descriptor.method == "GET":
            send = response_cacher(descriptor.method, send)
        return await send()

    async def _do_request(self, method: str, options: Options) -> TransportResponse:
        opts = RequestOptions.coerce(options)
        opts.method = method
        return await self.request(opts)

    async def copy(self, options: Options = None) -> TransportResponse:
        return await self._do_request("COPY", options)

    async def delete(self, options: Options = None) -> TransportResponse:
        return await self._do_request("DELETE", options)

    async def get(self, options: Options = None) -> TransportResponse:
        return await self._do_request("GET", options)

    async def head(self, options: Options = None) -> TransportResponse:
        return await self._do_request("HEAD", options)

    async def post(self, options: Options = None) -> TransportResponse:
        return await self._do_request("POST", options)

    async def put(self, options: Options = None) -> TransportResponse:
        return await self._do_request("PUT", options)

    async def aclose(self) -> None:
        """Close the transport (shared with every client derived through ``resource``)."""
        await self.transport.aclose()

    async def __aenter__(self) -> CouchClient:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.url}>"


__all__ = ["CouchClient", "Options"]
