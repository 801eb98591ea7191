# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Buffer terminal responses and classify them as results or HttpErrors."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

from ..errors import HttpError, ResponseClosedError, TransportError
from .models import ReadResult
from .transport import TransportResponse

ResponseReader = Callable[[TransportResponse], Awaitable[ReadResult]]


def join_buffers(buffers: Sequence[bytes]) -> bytes:
    """Concatenate chunks in order; a single chunk is returned as is."""
    if not buffers:
        return b""
    if len(buffers) == 1:
        return buffers[0]
    return b"".join(buffers)


def is_text_content(content_type: str | None) -> bool:
    """JSON and ``text/*`` error bodies are decoded into the error message."""
    value = (content_type or "").lower()
    return "application/json" in value or value.startswith("text")


async def read_response(response: TransportResponse) -> ReadResult:
    """
    Buffer ``response`` and return it when the status is below 300.

    Otherwise an HttpError is raised that carries the decoded message plus the raw body and
    headers. A stream that breaks early raises ResponseClosedError with the partial body.
    """
    buffers: list[bytes] = []
    try:
        async for chunk in response.aiter_bytes():
            if chunk:
                buffers.append(chunk)
    except (TransportError, OSError) as exc:
        partial = join_buffers(buffers) if buffers else None
        raise ResponseClosedError(str(exc) or "response closed", partial, response.headers) from exc
    finally:
        await response.aclose()

    body = join_buffers(buffers) if buffers else None
    headers = dict(response.headers)
    if response.status_code < 300:
        return ReadResult(body=body, headers=headers, status_code=response.status_code)

    text = None
    if body and is_text_content(headers.get("content-type")):
        text = body.decode("utf-8", errors="replace")
    raise HttpError(text, response.status_code, body=body, headers=headers)


__all__ = ["ResponseReader", "is_text_content", "join_buffers", "read_response"]
