# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request pipeline exports."""

from .adapters import RecordedRequest, StubResponse, StubTransport
from .body import is_live_source, prepare_data, stringify_json
from .headers import fill_missing, header_value, normalize_headers
from .httpx_transport import HttpxResponse, HttpxTransport
from .identity import ResourceIdentity, encode_query, encode_segment
from .merge import build_request
from .models import Headers, ReadResult, RequestDescriptor, RequestOptions
from .reader import join_buffers, read_response
from .redirect import MAX_REDIRECTS, redirect_location, should_redirect
from .transport import Transport, TransportRequest, TransportResponse, create_default_transport

__all__ = [
    "Headers",
    "HttpxResponse",
    "HttpxTransport",
    "MAX_REDIRECTS",
    "ReadResult",
    "RecordedRequest",
    "RequestDescriptor",
    "RequestOptions",
    "ResourceIdentity",
    "StubResponse",
    "StubTransport",
    "Transport",
    "TransportRequest",
    "TransportResponse",
    "build_request",
    "create_default_transport",
    "encode_query",
    "encode_segment",
    "fill_missing",
    "header_value",
    "is_live_source",
    "join_buffers",
    "normalize_headers",
    "prepare_data",
    "read_response",
    "redirect_location",
    "should_redirect",
    "stringify_json",
]
