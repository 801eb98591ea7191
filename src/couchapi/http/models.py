# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across couchapi."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .identity import encode_query

Headers = dict[str, str]

OPTION_KEYS = frozenset({"method", "path", "query", "headers", "data", "encoding"})


@dataclass
class RequestOptions:
    """Per-call request configuration; everything left unset falls back to the client defaults."""

    method: str | None = None
    path: str | None = None
    query: dict[str, Any] | None = None
    headers: dict[str, Any] | None = None
    data: Any = None
    encoding: str | None = None

    @classmethod
    def coerce(cls, options: RequestOptions | Mapping[str, Any] | str | None) -> RequestOptions:
        """
        Accept a RequestOptions, a mapping of option keys, a bare path string or None.

        The result is always a new object so callers can adjust it without touching the input.
        """
        if options is None:
            return cls()
        if isinstance(options, str):
            return cls(path=options)
        if isinstance(options, RequestOptions):
            return cls(
                method=options.method,
                path=options.path,
                query=dict(options.query) if options.query is not None else None,
                headers=dict(options.headers) if options.headers is not None else None,
                data=options.data,
                encoding=options.encoding,
            )
        if isinstance(options, Mapping):
            unknown = set(options) - OPTION_KEYS
            if unknown:
                raise TypeError(f"unknown request options: {', '.join(sorted(map(str, unknown)))}")
            query = options.get("query")
            headers = options.get("headers")
            return cls(
                method=options.get("method"),
                path=options.get("path"),
                query=dict(query) if query is not None else None,
                headers=dict(headers) if headers is not None else None,
                data=options.get("data"),
                encoding=options.get("encoding"),
            )
        raise TypeError(f"options {type(options).__name__}")


@dataclass
class RequestDescriptor:
    """A fully merged request: the identity defaults folded together with one call's options."""

    method: str
    protocol: str
    host: str
    port: int
    path: str
    query: dict[str, Any] = field(default_factory=dict)
    headers: Headers = field(default_factory=dict)
    data: Any = None

    @property
    def query_string(self) -> str:
        return encode_query(self.query)

    @property
    def url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}{self.path}{self.query_string}"


@dataclass
class ReadResult:
    """A buffered, successful (status < 300) response."""

    body: bytes | None
    headers: Headers = field(default_factory=dict)
    status_code: int | None = None

    @property
    def etag(self) -> str | None:
        """The ETag header without its surrounding quotes."""
        etag = self.headers.get("etag")
        if not etag:
            return None
        if len(etag) >= 2 and etag[0] == etag[-1] == '"':
            return etag[1:-1]
        return etag


__all__ = ["Headers", "ReadResult", "RequestDescriptor", "RequestOptions"]
