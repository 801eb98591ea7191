# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Clients for design document functions (views, shows, lists, update handlers)."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar
from urllib.parse import unquote

from .api import CouchAPI
from .client import Options
from .http.models import ReadResult, RequestOptions

# view parameters CouchDB expects as JSON values
JSON_VIEW_PARAMS = frozenset({"key", "keys", "startkey", "endkey", "start_key", "end_key"})


class DesignFunction:
    """A function of a design document, addressed as ``.../_design/<ddoc>/<kind>/<function>``."""

    kind: ClassVar[str] = ""

    def __init__(self, api: CouchAPI):
        self.api = api
        components = api.identity.path.split("/")
        self.name = f"{unquote(components[-3])}/{unquote(components[-1])}"

    async def raw(self, options: Options = None) -> ReadResult:
        return await self.api.raw(options)

    async def string(self, options: Options = None) -> str | None:
        return await self.api.string(options)

    async def json(self, options: Options = None) -> Any:
        return await self.api.json(options)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class View(DesignFunction):
    kind = "_view"

    async def query(self, params: Mapping[str, Any] | None = None, keys: Iterable[Any] | None = None) -> Any:
        """
        Query the view; with ``keys`` the keys are POSTed, otherwise it is a GET.

        ``key``, ``keys``, ``startkey`` and ``endkey`` (and their ``start_key``/``end_key``
        spellings) are JSON-encoded; other parameters are sent as given.
        """
        query = {
            name: json.dumps(value) if name in JSON_VIEW_PARAMS else value
            for name, value in (params or {}).items()
        }
        options = RequestOptions(method="GET", query=query or None)
        if keys is not None:
            options.method = "POST"
            options.data = {"keys": list(keys)}
        return await self.api.json(options)


class Show(DesignFunction):
    """Show functions mostly render non-JSON; use ``string``."""

    kind = "_show"


class List(DesignFunction):
    """List functions mostly render non-JSON; use ``string``."""

    kind = "_list"


class Update(DesignFunction):
    kind = "_update"


__all__ = ["DesignFunction", "JSON_VIEW_PARAMS", "List", "Show", "Update", "View"]
