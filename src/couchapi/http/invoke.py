# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Hand a merged request to a Transport and write its body."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from typing import Any

from .headers import header_value
from .models import RequestDescriptor
from .transport import Transport, TransportRequest, TransportResponse

logger = logging.getLogger(__name__)

CONTINUE = "100-continue"


def _to_bytes(chunk: Any) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    if isinstance(chunk, (list, tuple)):
        return bytes(chunk)
    raise TypeError(f"cannot write {type(chunk).__name__} to a request body")


async def body_stream(data: Any, continued: asyncio.Event | None = None) -> AsyncIterator[bytes]:
    """
    Yield the request body as bytes.

    With ``continued`` nothing is written before the event is set. Live sources are piped chunk
    by chunk as they produce data; static bodies are written once.
    """
    if continued is not None:
        await continued.wait()

    if isinstance(data, AsyncIterable):
        async for chunk in data:
            if chunk:
                yield _to_bytes(chunk)
    elif isinstance(data, Iterator):
        for chunk in data:
            if chunk:
                yield _to_bytes(chunk)
    else:
        yield _to_bytes(data)


async def send_request(
    transport: Transport,
    descriptor: RequestDescriptor,
    *,
    timeout: float | None = None,
) -> TransportResponse:
    """Issue ``descriptor`` on ``transport``; transport failures propagate as TransportError."""
    request = TransportRequest(
        method=descriptor.method,
        url=descriptor.url,
        headers=dict(descriptor.headers),
        timeout=timeout,
    )
    if descriptor.data is not None:
        wait_for = request.continued if header_value(descriptor.headers, "expect") == CONTINUE else None
        request.content = body_stream(descriptor.data, wait_for)

    logger.debug("%s %s", request.method, request.url)
    return await transport.send(request)


__all__ = ["body_stream", "send_request"]
