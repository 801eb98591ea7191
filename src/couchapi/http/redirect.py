# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Which responses are followed as redirects."""

from __future__ import annotations

from collections.abc import Callable, Mapping

MAX_REDIRECTS = 15

SAFE_METHODS = frozenset({"GET", "HEAD"})
SAFE_ONLY_CODES = frozenset({301, 302, 307})

RedirectDecider = Callable[[str, int], bool]


def should_redirect(method: str, status_code: int) -> bool:
    """
    303 is always followed; 301, 302 and 307 only for GET and HEAD.

    Everything else (300, 304-306, 308, any other status) is a terminal response.
    """
    if status_code == 303:
        return True
    return status_code in SAFE_ONLY_CODES and str(method).upper() in SAFE_METHODS


def redirect_location(
    method: str,
    status_code: int,
    headers: Mapping[str, str],
    decide: RedirectDecider = should_redirect,
) -> str | None:
    """The Location to follow, or None when the response is terminal."""
    if not decide(method, status_code):
        return None
    return headers.get("location") or None


__all__ = ["MAX_REDIRECTS", "RedirectDecider", "redirect_location", "should_redirect"]
