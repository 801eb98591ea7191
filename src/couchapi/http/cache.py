# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response cache hook for GET requests.

The hook sits between the transport and the response handling of every GET. It does not cache:
responses are handed back untouched, whatever their status or Cache-Control header.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

R = TypeVar("R")


def response_cacher(method: str, send: Callable[[], Awaitable[R]]) -> Callable[[], Awaitable[R]]:
    """Wrap ``send`` for ``method``; currently a pass-through for every method."""
    return send


__all__ = ["response_cacher"]
