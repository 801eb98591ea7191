# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from couchapi.config import ClientSettings
from couchapi.errors import CouchError, HttpError
from couchapi.http.adapters import StubResponse, StubTransport
from couchapi.runtime import open_database
from couchapi.utils.ids import path_for_id

DB = "http://localhost:5984/db"


def _db(responses=None):
    transport = StubTransport(responses)
    return open_database(DB, transport=transport, settings=ClientSettings()), transport


def _body(recorded):
    return json.loads(recorded.body)


@pytest.mark.parametrize(
    ("doc_id", "path"),
    [
        ("doc", "doc"),
        ("a/b", "a%2Fb"),
        ("with space", "with%20space"),
        ("_design/app", "_design/app"),
        ("_local/x/y", "_local/x%2Fy"),
        ("_design", "_design"),
    ],
)
def test_path_for_id(doc_id, path):
    assert path_for_id(doc_id) == path


def test_path_for_id_rejects_non_strings():
    with pytest.raises(TypeError):
        path_for_id(1)


def test_database_name_and_repr():
    db, _ = _db()
    assert db.name == "db"
    assert repr(db) == "<Database 'db' http://localhost:5984/db>"


@pytest.mark.asyncio
async def test_save_new_document_posts_and_stores_id_and_rev():
    db, transport = _db({f"POST {DB}": StubResponse.json({"ok": True, "id": "abc", "rev": "1-x"}, 201)})
    doc = {"field": "value"}

    result = await db.save(doc)

    assert result == {"ok": True, "id": "abc", "rev": "1-x"}
    assert doc == {"field": "value", "_id": "abc", "_rev": "1-x"}
    assert transport.requests[0].method == "POST"
    assert _body(transport.requests[0]) == {"field": "value"}


@pytest.mark.asyncio
async def test_save_existing_document_puts_and_updates_rev():
    db, transport = _db({f"PUT {DB}/doc1": StubResponse.json({"ok": True, "id": "doc1", "rev": "2-y"}, 201)})
    doc = {"_id": "doc1", "_rev": "1-x", "n": 1}

    await db.save(doc, {"method": "GET", "path": "ignored"})

    assert doc["_rev"] == "2-y"
    assert transport.requests[0].method == "PUT"
    assert _body(transport.requests[0])["_rev"] == "1-x"


@pytest.mark.asyncio
async def test_save_design_document_keeps_prefix_slash():
    db, transport = _db({f"PUT {DB}/_design/app": StubResponse.json({"ok": True, "id": "_design/app", "rev": "1-a"})})
    await db.save({"_id": "_design/app", "views": {}})
    assert transport.requests[0].url == f"{DB}/_design/app"


@pytest.mark.asyncio
async def test_save_conflict_leaves_document_untouched():
    conflict = StubResponse.json({"error": "conflict", "reason": "Document update conflict."}, 409)
    db, _ = _db({f"PUT {DB}/doc1": conflict})
    doc = {"_id": "doc1", "_rev": "1-stale"}

    with pytest.raises(HttpError) as excinfo:
        await db.save(doc)

    assert excinfo.value.code == 409
    assert excinfo.value.message == "conflict: Document update conflict."
    assert doc == {"_id": "doc1", "_rev": "1-stale"}


@pytest.mark.asyncio
async def test_save_rejects_non_documents_before_sending():
    db, transport = _db()
    with pytest.raises(TypeError):
        await db.save("doc")
    assert transport.requests == []


@pytest.mark.asyncio
async def test_save_all_applies_per_entry_results():
    results = [
        {"ok": True, "id": "a", "rev": "1-a"},
        {"id": "b", "error": "conflict", "reason": "Document update conflict."},
        {"ok": True, "id": "c", "rev": "2-c"},
    ]
    db, transport = _db({f"POST {DB}/_bulk_docs": StubResponse.json(results, 201)})
    docs = [{"_id": "a"}, {"_id": "b", "_rev": "1-b"}, {"_id": "c", "_rev": "1-c"}]

    assert await db.save_all(docs) == results

    assert docs == [{"_id": "a", "_rev": "1-a"}, {"_id": "b", "_rev": "1-b"}, {"_id": "c", "_rev": "2-c"}]
    assert _body(transport.requests[0]) == {"docs": [{"_id": "a"}, {"_id": "b", "_rev": "1-b"}, {"_id": "c", "_rev": "1-c"}]}


@pytest.mark.asyncio
async def test_save_all_forwards_bulk_flags_and_assigns_new_ids():
    db, transport = _db({f"POST {DB}/_bulk_docs": StubResponse.json([{"ok": True, "id": "gen", "rev": "1-g"}])})
    docs = [{"x": 1}]

    await db.save_all(docs, {"data": {"all_or_nothing": True}})

    assert docs == [{"x": 1, "_id": "gen", "_rev": "1-g"}]
    assert _body(transport.requests[0]) == {"all_or_nothing": True, "docs": [{"x": 1}]}


@pytest.mark.asyncio
async def test_save_all_rejects_non_lists():
    db, _ = _db()
    with pytest.raises(TypeError):
        await db.save_all({"_id": "a"})


@pytest.mark.asyncio
async def test_load_encodes_the_id():
    db, transport = _db({f"GET {DB}/doc%2F1?revs=true": StubResponse.json({"_id": "doc/1"})})
    assert await db.load("doc/1", {"query": {"revs": "true"}}) == {"_id": "doc/1"}
    assert transport.requests[0].method == "GET"


@pytest.mark.asyncio
async def test_load_missing_document_raises_http_error():
    db, _ = _db({f"{DB}/nope": StubResponse.json({"error": "not_found", "reason": "missing"}, 404)})
    with pytest.raises(HttpError) as excinfo:
        await db.load("nope")
    assert excinfo.value.message == "not found: missing"


@pytest.mark.asyncio
async def test_load_rejects_non_string_ids():
    db, _ = _db()
    with pytest.raises(TypeError):
        await db.load(1)


@pytest.mark.asyncio
async def test_remove_document_uses_its_revision():
    db, transport = _db({f"DELETE {DB}/doc1?rev=1-x": StubResponse.json({"ok": True, "id": "doc1", "rev": "2-x"})})
    result = await db.remove({"_id": "doc1", "_rev": "1-x"})
    assert result["ok"] is True
    assert [r.method for r in transport.requests] == ["DELETE"]


@pytest.mark.asyncio
async def test_remove_bare_id_looks_up_revision_first():
    db, transport = _db(
        {
            f"HEAD {DB}/doc1": StubResponse(200, {"etag": '"3-z"'}),
            f"DELETE {DB}/doc1?rev=3-z": StubResponse.json({"ok": True, "id": "doc1", "rev": "4-z"}),
        }
    )
    result = await db.remove("doc1")
    assert result["rev"] == "4-z"
    assert [r.method for r in transport.requests] == ["HEAD", "DELETE"]


@pytest.mark.asyncio
async def test_remove_bare_id_with_explicit_rev_skips_lookup():
    db, transport = _db({f"DELETE {DB}/doc1?rev=1-x": StubResponse.json({"ok": True})})
    await db.remove("doc1", {"query": {"rev": "1-x"}})
    assert [r.method for r in transport.requests] == ["DELETE"]


@pytest.mark.asyncio
async def test_remove_bare_id_without_etag_fails():
    db, transport = _db({f"HEAD {DB}/doc1": StubResponse(200)})
    with pytest.raises(CouchError, match="rev not found"):
        await db.remove("doc1")
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_remove_bare_id_of_missing_document_fails_with_http_error():
    db, _ = _db({f"HEAD {DB}/doc1": StubResponse(404)})
    with pytest.raises(HttpError):
        await db.remove("doc1")


@pytest.mark.asyncio
async def test_remove_rejects_bad_arguments():
    db, transport = _db()
    with pytest.raises(TypeError):
        await db.remove({"_id": "doc1"})
    with pytest.raises(TypeError):
        await db.remove({"_rev": "1-x"})
    with pytest.raises(TypeError):
        await db.remove(5)
    assert transport.requests == []


@pytest.mark.asyncio
async def test_remove_all_marks_documents_deleted():
    db, transport = _db({f"POST {DB}/_bulk_docs": StubResponse.json([{"ok": True, "id": "a", "rev": "2-a"}])})
    docs = [{"_id": "a", "_rev": "1-a"}]
    await db.remove_all(docs)
    assert docs == [{"_id": "a", "_rev": "2-a", "_deleted": True}]
    assert _body(transport.requests[0]) == {"docs": [{"_id": "a", "_rev": "1-a", "_deleted": True}]}


@pytest.mark.asyncio
async def test_duplicate_sends_copy_with_destination():
    db, transport = _db({f"COPY {DB}/src": StubResponse.json({"ok": True, "id": "dst", "rev": "1-d"}, 201)})
    result = await db.duplicate("src", "dst", {"headers": {"Destination": "ignored"}})
    assert result["id"] == "dst"
    recorded = transport.requests[0]
    assert recorded.method == "COPY"
    assert recorded.headers["destination"] == "dst"


@pytest.mark.asyncio
async def test_duplicate_document_copies_its_revision():
    db, transport = _db({f"COPY {DB}/_design/src?rev=2-s": StubResponse.json({"ok": True})})
    await db.duplicate({"_id": "_design/src", "_rev": "2-s"}, "dst?rev=1-d")
    assert transport.requests[0].headers["destination"] == "dst?rev=1-d"


@pytest.mark.asyncio
async def test_duplicate_rejects_bad_arguments():
    db, _ = _db()
    with pytest.raises(TypeError):
        await db.duplicate({"_rev": "1-x"}, "dst")
    with pytest.raises(TypeError):
        await db.duplicate("src", None)
    with pytest.raises(TypeError):
        await db.duplicate(1, "dst")


@pytest.mark.asyncio
async def test_revision_reads_the_etag():
    db, _ = _db({f"HEAD {DB}/doc1": StubResponse(200, {"etag": '"5-e"'})})
    assert await db.revision("doc1") == "5-e"
    with pytest.raises(TypeError):
        await db.revision(None)


@pytest.mark.asyncio
async def test_exists_for_database_and_documents():
    db, transport = _db({f"HEAD {DB}": StubResponse(200), f"HEAD {DB}/doc1": StubResponse(404)})
    assert await db.exists() is True
    assert await db.exists("doc1") is False
    assert await db.exists("unreachable") is False
    assert [r.url for r in transport.requests] == [DB, f"{DB}/doc1", f"{DB}/unreachable"]


@pytest.mark.asyncio
async def test_view_query_get_and_post():
    view_url = f"{DB}/_design/app/_view/by_name"
    rows = {"total_rows": 1, "rows": [{"id": "a", "key": "x", "value": None}]}
    db, transport = _db(
        {
            f'GET {view_url}?key=%22x%22&limit=2': StubResponse.json(rows),
            f"POST {view_url}?include_docs=true": StubResponse.json(rows),
        }
    )
    view = db.view("app/by_name")
    assert view.name == "app/by_name"

    assert await view.query({"key": "x", "limit": 2}) == rows
    assert await view.query({"include_docs": True}, keys=["x", "y"]) == rows
    assert _body(transport.requests[1]) == {"keys": ["x", "y"]}


@pytest.mark.asyncio
async def test_design_functions_address_their_kind():
    db, _ = _db({f"{DB}/_design/app/_show/page/doc1": StubResponse(200, {"content-type": "text/html"}, [b"<p>"])})
    show = db.show("app/page")
    assert show.name == "app/page"
    assert await show.string("doc1") == "<p>"

    assert db.list("app/feed").api.url == f"{DB}/_design/app/_list/feed"
    assert db.update("app/bump").api.url == f"{DB}/_design/app/_update/bump"
    assert repr(db.update("app/bump")) == "<Update 'app/bump'>"
    with pytest.raises(TypeError):
        db.view(None)


@pytest.mark.asyncio
async def test_update_handler_posts_through_json():
    url = f"{DB}/_design/app/_update/bump/doc1"
    db, transport = _db({f"PUT {url}": StubResponse.json({"ok": True})})
    assert await db.update("app/bump").json({"method": "PUT", "path": "doc1", "data": {"n": 1}}) == {"ok": True}
    assert _body(transport.requests[0]) == {"n": 1}
