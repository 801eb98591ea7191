# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory Transport used to exercise the request pipeline without a server."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any, Union

from ..errors import ErrorCategory, TransportError
from .models import Headers
from .transport import Transport, TransportRequest


@dataclass
class StubResponse:
    """Programmable response; ``error`` is raised after the chunks, like a connection dropped mid-body."""

    status_code: int = 200
    headers: Headers = field(default_factory=dict)
    chunks: list[bytes] = field(default_factory=list)
    error: BaseException | None = None
    closed: bool = False

    @classmethod
    def json(cls, payload: Any, status_code: int = 200, headers: Headers | None = None) -> StubResponse:
        merged = {"content-type": "application/json"}
        merged.update(headers or {})
        return cls(status_code=status_code, headers=merged, chunks=[json.dumps(payload).encode("utf-8")])

    @classmethod
    def redirect(cls, location: str, status_code: int = 302) -> StubResponse:
        return cls(status_code=status_code, headers={"location": location})

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: Headers
    body: bytes | None = None


StubEntry = Union[StubResponse, list[StubResponse], BaseException]


class StubTransport(Transport):
    """
    Deterministic, programmable Transport for tests.

    Responses are looked up by ``"METHOD url"`` first, then by ``url``. A list of responses is
    consumed in order, repeating the last one. An exception entry is raised from ``send``.
    With ``acknowledge_continue=False`` the server never sends ``100 Continue`` and bodies that
    wait for it are never read.
    """

    def __init__(self, responses: dict[str, StubEntry] | None = None, *, acknowledge_continue: bool = True):
        self._responses: dict[str, StubEntry] = dict(responses or {})
        self.acknowledge_continue = acknowledge_continue
        self.requests: list[RecordedRequest] = []
        self.closed = False

    def add(self, url: str, response: StubEntry, method: str | None = None) -> None:
        key = f"{method.upper()} {url}" if method else url
        self._responses[key] = response

    async def send(self, request: TransportRequest) -> StubResponse:
        body = None
        waits_for_continue = request.headers.get("expect") == "100-continue"
        if self.acknowledge_continue:
            request.continued.set()
        if request.content is not None and (self.acknowledge_continue or not waits_for_continue):
            body = b"".join([chunk async for chunk in request.content])
        self.requests.append(RecordedRequest(request.method, request.url, dict(request.headers), body))

        entry = self._responses.get(f"{request.method} {request.url}", self._responses.get(request.url))
        if entry is None:
            raise TransportError("No stubbed response configured", ErrorCategory.CONNECTION_ERROR)
        if isinstance(entry, BaseException):
            raise entry
        if isinstance(entry, list):
            return entry.pop(0) if len(entry) > 1 else entry[0]
        return entry

    async def aclose(self) -> None:
        self.closed = True


__all__ = ["RecordedRequest", "StubResponse", "StubTransport"]
