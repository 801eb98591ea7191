# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Connection and addressing state of a client.

A ResourceIdentity is the snapshot every request is derived from: protocol, host, port, default
path, default query, default headers and credentials. It is never mutated; changing the URL or
the credentials, addressing a sub-resource or following a redirect all produce a new instance.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qsl, quote, unquote, urlencode, urljoin, urlsplit

from ..config import DEFAULT_CONTENT_TYPE
from ..errors import ConfigError
from .headers import fill_missing, normalize_headers

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5984
SCHEME_PORTS = {"http": 80, "https": 443}
AUTH_HEADER = "authorization"


def encode_segment(segment: str) -> str:
    """Percent-encode a single path segment, slashes included."""
    return quote(segment, safe="")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(query: Mapping[str, Any] | None) -> str:
    """Serialize a query mapping as ``?a=b&c=d``; an empty query gives ``""``. None values are skipped."""
    pairs = [(str(key), _query_value(value)) for key, value in (query or {}).items() if value is not None]
    if not pairs:
        return ""
    return "?" + urlencode(pairs)


@dataclass(frozen=True)
class ResourceIdentity:
    protocol: str = "http"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    path: str = "/"
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    content_type: str = DEFAULT_CONTENT_TYPE
    auth: str | None = None
    redirects: int = 0

    @classmethod
    def from_url(
        cls,
        url: str | None = None,
        headers: Mapping[str, Any] | None = None,
        *,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> ResourceIdentity:
        """
        Build an identity from a URL string and optional default headers.

        Missing parts default to ``http://localhost:5984/``; a URL naming a host but no port
        uses the scheme's port. Userinfo in the URL becomes the credentials. A ``Content-Type``
        entry in ``headers`` replaces the default content type.
        """
        parsed = urlsplit(url or "")
        protocol = (parsed.scheme or "http").lower()
        if protocol not in SCHEME_PORTS:
            raise ConfigError(f"unsupported protocol {protocol!r} in {url!r}")

        try:
            explicit_port = parsed.port
        except ValueError as exc:
            raise ConfigError(f"invalid port in {url!r}") from exc

        if explicit_port:
            port = explicit_port
        elif parsed.hostname:
            port = SCHEME_PORTS[protocol]
        else:
            port = DEFAULT_PORT

        extra_headers = normalize_headers(headers)
        if "content-type" in extra_headers:
            content_type = extra_headers.pop("content-type")

        userinfo = parsed.netloc.rpartition("@")[0] if "@" in parsed.netloc else ""
        identity = cls(
            protocol=protocol,
            host=parsed.hostname or DEFAULT_HOST,
            port=port,
            path=parsed.path or "/",
            query=dict(parse_qsl(parsed.query, keep_blank_values=True)),
            headers={},
            content_type=content_type,
        ).with_credentials(unquote(userinfo) or None)

        if extra_headers:
            identity = replace(identity, headers=fill_missing(identity.headers, extra_headers))
        return identity

    def with_url(self, url: str | None) -> ResourceIdentity:
        """A fresh identity for ``url``; only the default content type survives."""
        return ResourceIdentity.from_url(url, content_type=self.content_type)

    def with_credentials(self, user: Any = None, password: Any = None) -> ResourceIdentity:
        """
        Set Basic credentials from ``user`` (``"user"`` or ``"user:pass"``) and ``password``.

        Without a user the credentials are cleared.
        """
        headers = dict(self.headers)
        if user is None or user == "":
            headers.pop(AUTH_HEADER, None)
            return replace(self, headers=headers, auth=None)
        if not isinstance(user, str):
            raise TypeError("username not a string")
        if password is None:
            auth = user
        elif isinstance(password, str):
            auth = f"{user}:{password}"
        else:
            raise TypeError("password not a string")

        token = base64.b64encode(auth.encode("utf-8")).decode("ascii")
        headers[AUTH_HEADER] = f"Basic {token}"
        return replace(self, headers=headers, auth=auth)

    @property
    def auth_url(self) -> str:
        """The ``user:pass@`` fragment embedded in URLs, or ``""``."""
        if not self.auth:
            return ""
        return quote(self.auth, safe=":") + "@"

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.auth_url}{self.host}:{self.port}"

    @property
    def url(self) -> str:
        """Full URL including credentials and the default query, in plain text."""
        return self.base_url + self.get_path() + self.get_query()

    def get_path(self, extra: str | None = None) -> str:
        """The default path, extended by ``extra`` with exactly one slash between them."""
        path = self.path
        if extra:
            if not extra.startswith("/") and not path.endswith("/"):
                path += "/"
            elif extra.startswith("/") and path.endswith("/"):
                extra = extra[1:]
            path += extra
        return path

    def merge_query(self, extra: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Per-call query values; default query entries fill the keys the call left unset."""
        merged: dict[str, Any] = dict(extra or {})
        fill_missing(self.query, merged)
        return merged

    def get_query(self, extra: Mapping[str, Any] | None = None) -> str:
        return encode_query(self.merge_query(extra))

    def default_headers(self) -> dict[str, str]:
        """Default headers including the default content type."""
        headers = {"content-type": self.content_type}
        headers.update(self.headers)
        return headers

    def resource(self, *segments: str | Sequence[str]) -> ResourceIdentity:
        """
        Identity for a sub-resource; each segment is percent-encoded.

        ``resource("db", "doc/id")`` on ``http://localhost:5984/`` addresses
        ``http://localhost:5984/db/doc%2Fid``. A single list or tuple argument is unpacked.
        """
        parts: Sequence[Any] = segments
        if len(segments) == 1 and isinstance(segments[0], (list, tuple)):
            parts = segments[0]
        for part in parts:
            if not isinstance(part, str):
                raise TypeError("component not a string")

        encoded = [encode_segment(part) for part in parts]
        if not self.path.endswith("/"):
            encoded.insert(0, "")
        return replace(self, path=self.path + "/".join(encoded), redirects=0)

    def redirected_to(self, location: str, base: str | None = None) -> ResourceIdentity:
        """
        Identity for a redirect target, one hop further than this one.

        Relative locations resolve against ``base``, the URL that was requested (this
        identity's URL by default). Headers, content type and, when the location carries
        none, credentials are carried over.
        """
        target = ResourceIdentity.from_url(
            urljoin(base or self.url, location),
            self.headers,
            content_type=self.content_type,
        )
        if target.auth is None and self.auth is not None:
            target = target.with_credentials(self.auth)
        return replace(target, redirects=self.redirects + 1)


__all__ = ["ResourceIdentity", "encode_query", "encode_segment"]
