# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header and option-map utilities.

HTTP header field names are case-insensitive (RFC 9110). Clients keep their default headers
lower-cased so per-call headers can be folded onto them with a plain dict lookup.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, TypeVar

V = TypeVar("V")


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Accepts plain dicts, httpx.Headers, anything with ``.items()`` and iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        return dict(items())

    return dict(headers)


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping; colliding keys keep the last value."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    value = normalize_headers(headers).get(str(name).strip().lower())
    return default if value is None else value.strip()


def fill_missing(defaults: Mapping[str, V] | None, into: MutableMapping[str, V]) -> MutableMapping[str, V]:
    """
    Copy every key of ``defaults`` that ``into`` does not define yet; ``into`` keeps its values.

    A key whose value is None counts as not defined. ``into`` is updated in place and returned.
    """
    for key, value in (defaults or {}).items():
        if into.get(key) is None:
            into[key] = value
    return into


__all__ = ["fill_missing", "header_value", "normalize_headers"]
