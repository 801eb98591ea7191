# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol

from ..config import ClientSettings, load_client_settings
from .models import Headers


@dataclass
class TransportRequest:
    """
    A request as handed to a Transport.

    ``content`` is an async byte stream (None for bodiless requests). When the request carries
    ``Expect: 100-continue`` the stream does not yield before ``continued`` is set; transports
    set it once the server acknowledges the headers, or as soon as the request is dispatched
    when they cannot observe interim responses.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=dict)
    content: AsyncIterator[bytes] | None = None
    continued: asyncio.Event = field(default_factory=asyncio.Event)
    timeout: float | None = None


class TransportResponse(Protocol):
    """An open response: status, lower-case headers and a byte stream."""

    status_code: int
    headers: Headers

    def aiter_bytes(self) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


class Transport(Protocol):
    """Minimal protocol for issuing HTTP requests."""

    async def send(self, request: TransportRequest) -> TransportResponse: ...

    async def aclose(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_transport(settings: ClientSettings | None = None) -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport(settings or load_client_settings())


__all__ = ["Transport", "TransportRequest", "TransportResponse", "create_default_transport"]
