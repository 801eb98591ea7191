# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import httpx

from ..config import ClientSettings, load_client_settings
from ..errors import TransportError
from .headers import normalize_headers
from .transport import Transport, TransportRequest, TransportResponse

logger = logging.getLogger(__name__)


class HttpxResponse(TransportResponse):
    """Streamed httpx response exposed through the TransportResponse protocol."""

    def __init__(self, response: httpx.Response):
        self._response = response
        self.status_code = response.status_code
        self.headers = normalize_headers(response.headers)

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as exc:
            raise TransportError.from_exception(exc) from exc

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpxTransport(Transport):
    """Asynchronous httpx client wrapper.

    Redirects are never followed here; the client decides which ones to follow.
    """

    def __init__(self, settings: ClientSettings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or load_client_settings()
        self._client = client or httpx.AsyncClient(
            follow_redirects=False,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    async def send(self, request: TransportRequest) -> HttpxResponse:
        headers = dict(request.headers)
        headers.setdefault("user-agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        # httpx swallows interim 1xx responses, so the body is released with the request
        request.continued.set()
        try:
            http_request = self._client.build_request(
                request.method,
                request.url,
                headers=headers,
                content=request.content,
                timeout=timeout,
            )
            response = await self._client.send(http_request, stream=True, follow_redirects=False)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", request.method, request.url, exc)
            raise TransportError.from_exception(exc) from exc
        except OSError as exc:
            logger.debug("%s %s failed: %s", request.method, request.url, exc)
            raise TransportError.from_exception(exc) from exc

        return HttpxResponse(response)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["HttpxResponse", "HttpxTransport"]
