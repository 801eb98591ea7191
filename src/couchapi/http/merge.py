# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fold per-call request options onto a client's defaults."""

from __future__ import annotations

from .body import prepare_data
from .headers import fill_missing, normalize_headers
from .identity import ResourceIdentity
from .models import RequestDescriptor, RequestOptions

DEFAULT_METHOD = "GET"
BODY_METHODS = frozenset({"POST", "PUT"})


def build_request(identity: ResourceIdentity, options: RequestOptions) -> RequestDescriptor:
    """
    Merge ``options`` with the defaults of ``identity``.

    Call values always win: default query parameters and headers only fill keys the call did
    not set. POST and PUT bodies are prepared (framing headers, JSON serialization).
    """
    method = (options.method or DEFAULT_METHOD).upper()
    headers = normalize_headers(options.headers)
    fill_missing(identity.headers, headers)

    data = None
    if method in BODY_METHODS:
        data = prepare_data(options.data, identity.content_type, headers)

    return RequestDescriptor(
        method=method,
        protocol=identity.protocol,
        host=identity.host,
        port=identity.port,
        path=identity.get_path(options.path),
        query=identity.merge_query(options.query),
        headers=headers,
        data=data,
    )


__all__ = ["BODY_METHODS", "DEFAULT_METHOD", "build_request"]
