# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request body preparation for POST and PUT requests.

``prepare_data`` decides how a body is framed (Content-Length or chunked Transfer-Encoding),
whether the client waits for ``100-continue`` before writing it, and serializes structured
values to JSON. Headers are lower-case keyed and updated in place.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import AsyncIterable, Iterator
from typing import Any

BYTE_TYPES = (bytes, bytearray, memoryview)
SEQUENCE_TYPES = (list, tuple)


def is_live_source(data: Any) -> bool:
    """True for bodies produced incrementally (async iterables, generators and other iterators)."""
    return isinstance(data, AsyncIterable) or isinstance(data, Iterator)


def _json_default(value: Any) -> Any:
    if callable(value):
        try:
            return inspect.getsource(value).strip()
        except (OSError, TypeError):
            return repr(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def stringify_json(data: Any) -> str:
    """JSON-encode ``data``; callables (e.g. map functions) are encoded as their source text."""
    return json.dumps(data, default=_json_default, separators=(",", ":"))


def _passes_through(data: Any) -> bool:
    return isinstance(data, (str, *BYTE_TYPES, *SEQUENCE_TYPES))


def prepare_data(data: Any, content_type: str, headers: dict[str, str]) -> Any:
    """Set the framing headers for ``data`` and return the (possibly serialized) body."""
    has_length = "content-length" in headers
    has_encoding = "transfer-encoding" in headers

    headers.setdefault("content-type", content_type)

    if data is None:
        if not has_length and not has_encoding:
            headers["content-length"] = "0"
        return None

    if has_length and has_encoding:
        # fully framed by the caller
        return data

    headers.setdefault("expect", "100-continue")

    if not has_length and not has_encoding:
        if isinstance(data, str):
            headers["content-length"] = str(len(data.encode("utf-8")))
        elif isinstance(data, BYTE_TYPES + SEQUENCE_TYPES):
            headers["content-length"] = str(len(data))
        elif is_live_source(data):
            headers["transfer-encoding"] = "chunked"
        else:
            data = stringify_json(data)
            headers["content-length"] = str(len(data.encode("utf-8")))
    elif has_length and not _passes_through(data) and not is_live_source(data):
        data = stringify_json(data)

    return data


__all__ = ["is_live_source", "prepare_data", "stringify_json"]
