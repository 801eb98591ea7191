# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Document id helpers."""

from __future__ import annotations

from typing import Any

from ..http.identity import encode_segment


def path_for_id(doc_id: Any) -> str:
    """
    Request path for a document id.

    Regular ids are encoded whole (``a/b`` -> ``a%2Fb``). Ids of special documents such as
    ``_design/app`` or ``_local/x`` keep the slash after their prefix; the prefix and the rest
    are encoded independently.
    """
    if not isinstance(doc_id, str):
        raise TypeError(f"id {type(doc_id).__name__}")
    if doc_id.startswith("_") and "/" in doc_id:
        prefix, rest = doc_id.split("/", 1)
        return f"{encode_segment(prefix)}/{encode_segment(rest)}"
    return encode_segment(doc_id)


__all__ = ["path_for_id"]
