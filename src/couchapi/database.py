# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Document operations on one database.

Documents are plain dicts carrying CouchDB's ``_id`` and ``_rev``. Writes use optimistic
concurrency: updating or deleting an existing document needs its current revision, and a
successful write stores the new revision on the document. A failed write leaves the document
as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any
from urllib.parse import unquote

from .api import CouchAPI
from .client import Options
from .design import DesignFunction, List, Show, Update, View
from .errors import CouchError
from .http.models import RequestOptions
from .utils.ids import path_for_id

logger = logging.getLogger(__name__)

BULK_DOCS = "_bulk_docs"


def _apply_revision(doc: Any, result: Any) -> None:
    """Store ``result``'s id/rev on ``doc`` when the write succeeded."""
    if not isinstance(doc, MutableMapping) or not isinstance(result, Mapping):
        return
    if result.get("error") or not result.get("id") or not result.get("rev"):
        return
    if doc.get("_id") is None:
        doc["_id"] = result["id"]
    doc["_rev"] = result["rev"]


class Database:
    """Document-level operations on top of a CouchAPI bound to the database URL."""

    def __init__(self, api: CouchAPI):
        self.api = api
        self.name = unquote(api.identity.path.split("/")[-1])

    async def save(self, doc: MutableMapping[str, Any], options: Options = None) -> Any:
        """
        Create (no ``_id``, POST) or update (``_id`` set, PUT) a document.

        On success ``_rev`` is set from the response, and ``_id`` too if the document had none.
        Method and path in ``options`` are always overridden.
        """
        if not isinstance(doc, MutableMapping):
            raise TypeError(f"doc {type(doc).__name__}")
        opts = RequestOptions.coerce(options)
        opts.data = doc
        if doc.get("_id") is None:
            opts.method = "POST"
            opts.path = ""
        else:
            opts.method = "PUT"
            opts.path = path_for_id(doc["_id"])

        result = await self.api.json(opts)
        _apply_revision(doc, result)
        return result

    async def save_all(self, docs: list[MutableMapping[str, Any]], options: Options = None) -> Any:
        """
        Save many documents with one ``_bulk_docs`` request.

        This is not atomic: each document whose result entry has an id and rev (and no error)
        gets them; documents whose entry reports an error (e.g. a conflict) stay untouched, so
        inspect the returned list. Extra bulk flags such as ``all_or_nothing`` can be passed in
        ``options.data`` and are forwarded to the server as is.
        """
        if not isinstance(docs, list):
            raise TypeError(f"docs {type(docs).__name__}")
        opts = RequestOptions.coerce(options)
        opts.method = "POST"
        opts.path = BULK_DOCS
        data = dict(opts.data or {})
        data["docs"] = docs
        opts.data = data

        result = await self.api.json(opts)
        if isinstance(result, list):
            for doc, entry in zip(docs, result):
                _apply_revision(doc, entry)
        return result

    async def load(self, doc_id: str, options: Options = None) -> Any:
        """Fetch a regular, design or local document."""
        if not isinstance(doc_id, str):
            raise TypeError(f"id {type(doc_id).__name__}")
        opts = RequestOptions.coerce(options)
        opts.method = "GET"
        opts.path = path_for_id(doc_id)
        return await self.api.json(opts)

    async def duplicate(self, source: str | Mapping[str, Any], to_id: str, options: Options = None) -> Any:
        """
        COPY a document to ``to_id``.

        ``to_id`` may carry a target revision as ``"id?rev=..."``. When ``source`` is a document
        with a ``_rev``, that revision is copied; otherwise pass ``query={"rev": ...}``.
        """
        opts = RequestOptions.coerce(options)
        if isinstance(source, Mapping):
            if isinstance(source.get("_rev"), str):
                query = dict(opts.query or {})
                query["rev"] = source["_rev"]
                opts.query = query
            if "_id" not in source:
                raise TypeError("from._id undefined")
            source = source["_id"]
        if not isinstance(source, str):
            raise TypeError(f"from_id {type(source).__name__}")
        if not isinstance(to_id, str):
            raise TypeError(f"to_id {type(to_id).__name__}")

        headers = {key: value for key, value in (opts.headers or {}).items() if str(key).lower() != "destination"}
        headers["destination"] = to_id
        opts.headers = headers
        opts.method = "COPY"
        opts.path = path_for_id(source)
        return await self.api.json(opts)

    async def remove(self, doc_or_id: str | Mapping[str, Any], options: Options = None) -> Any:
        """
        DELETE a document, given as a document with ``_id`` and ``_rev`` or as a bare id.

        For a bare id without ``query={"rev": ...}`` the current revision is looked up with a
        HEAD request first.
        """
        opts = RequestOptions.coerce(options)
        opts.method = "DELETE"
        query = dict(opts.query or {})
        opts.query = query

        if isinstance(doc_or_id, str):
            opts.path = path_for_id(doc_or_id)
            if not isinstance(query.get("rev"), str):
                logger.debug("looking up the revision of %s", doc_or_id)
                rev = await self.revision(doc_or_id)
                if not isinstance(rev, str):
                    raise CouchError("rev not found")
                query["rev"] = rev
            return await self.api.json(opts)

        if isinstance(doc_or_id, Mapping):
            if not isinstance(doc_or_id.get("_id"), str):
                raise TypeError(f"doc._id {type(doc_or_id.get('_id')).__name__}")
            opts.path = path_for_id(doc_or_id["_id"])
            query["rev"] = query.get("rev") or doc_or_id.get("_rev")
            if not isinstance(query["rev"], str):
                raise TypeError(f"[doc._]rev {type(query['rev']).__name__}")
            return await self.api.json(opts)

        raise TypeError(f"doc_or_id {type(doc_or_id).__name__}")

    async def remove_all(self, docs: list[MutableMapping[str, Any]], options: Options = None) -> Any:
        """Mark every document ``_deleted`` and bulk-save them; see ``save_all``."""
        if not isinstance(docs, list):
            raise TypeError(f"docs {type(docs).__name__}")
        for doc in docs:
            doc["_deleted"] = True
        return await self.save_all(docs, options)

    async def revision(self, doc_id: str) -> str | None:
        """The current revision of a document (from the ETag of a HEAD request), or None."""
        if not isinstance(doc_id, str):
            raise TypeError(f"id {type(doc_id).__name__}")
        result = await self.api.raw(RequestOptions(method="HEAD", path=path_for_id(doc_id)))
        return result.etag

    async def exists(self, doc_id: str | None = None) -> bool:
        """True if the document (or, without an id, the database) answers a HEAD with 2xx."""
        path = path_for_id(doc_id) if isinstance(doc_id, str) and doc_id else ""
        return await self.api.exists(RequestOptions(path=path))

    def _design(self, kind: type[DesignFunction], name: str) -> DesignFunction:
        if not isinstance(name, str):
            raise TypeError(f"name {type(name).__name__}")
        ddoc, _, function = name.partition("/")
        return kind(self.api.resource("_design", ddoc, kind.kind, function))

    def view(self, name: str) -> View:
        """Client for the view ``"ddoc/view_name"``."""
        return self._design(View, name)

    def show(self, name: str) -> Show:
        """Client for the show function ``"ddoc/show_name"``."""
        return self._design(Show, name)

    def update(self, name: str) -> Update:
        """Client for the update handler ``"ddoc/update_name"``."""
        return self._design(Update, name)

    def list(self, name: str) -> List:
        """Client for the list function ``"ddoc/list_name"``."""
        return self._design(List, name)

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> Database:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()

    def __repr__(self) -> str:
        return f"<Database {self.name!r} {self.api.url}>"


__all__ = ["BULK_DOCS", "Database"]
