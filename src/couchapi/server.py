# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Server-level operations: databases and their lifecycle."""

from __future__ import annotations

from typing import Any

from .api import CouchAPI
from .database import Database
from .http.identity import encode_segment
from .http.models import RequestOptions


class Server:
    """Operations on the CouchDB server a CouchAPI points at."""

    def __init__(self, api: CouchAPI):
        self.api = api

    def database(self, name: str) -> Database:
        """Database client for ``name`` (URL-encoded, so ``a/b`` is one database)."""
        return Database(self.api.resource([name]))

    async def exists(self, name: str | None = None) -> bool:
        """True if the server (without a name) or the database answers a HEAD with 2xx."""
        path = encode_segment(name) if isinstance(name, str) and name else ""
        return await self.api.exists(RequestOptions(path=path))

    async def create(self, name: str) -> Any:
        """Create a database."""
        return await self._db("PUT", name)

    async def destroy(self, name: str) -> Any:
        """Delete a database and all of its documents."""
        return await self._db("DELETE", name)

    async def _db(self, method: str, name: str) -> Any:
        if not isinstance(name, str):
            raise TypeError(f"name {type(name).__name__}")
        return await self.api.json(RequestOptions(method=method, path=encode_segment(name)))

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> Server:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()

    def __repr__(self) -> str:
        return f"<Server {self.api.url}>"


__all__ = ["Server"]
