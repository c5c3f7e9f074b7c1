import asyncio
import functools
import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from server.api import api_app
from server.api.api_app import app
from shared.clients.api.ApiClientManager import ApiClientManager
from shared.clients.api.outline.ApiClientOutline import ApiClientOutline
from shared.stores.RootStore import RootStore
from tests.fakes import at, make_document

HEADERS = {"X-API-Key": "app-key"}


@pytest.fixture
def root_store(helper_config, backend):
    api_client = ApiClientOutline(helper_config=helper_config, transport=httpx.MockTransport(backend.handle))
    asyncio.run(api_client.boot())
    store = RootStore(helper_config=helper_config, client=api_client)
    yield store
    asyncio.run(api_client.close())


@pytest.fixture
def client(helper_config, root_store):
    # the lifespan is not entered, state is wired by hand
    app.state.config = helper_config
    app.state.logging = helper_config.get_logger()
    app.state.root_store = root_store
    return TestClient(app)


def test_requires_api_key(client):
    assert client.get("/documents/recent").status_code == 401
    assert client.get("/documents/recent", headers={"X-API-Key": "wrong"}).status_code == 401


def test_recent_lists_cache(client, root_store):
    root_store.documents.add(make_document("a", updatedAt=at(1)))
    root_store.documents.add(make_document("b", updatedAt=at(2)))

    res = client.get("/documents/recent", headers=HEADERS)

    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 2
    assert [item["id"] for item in body["documents"]] == ["b", "a"]


def test_viewed_fetches_listing_first(client, backend):
    backend.on("documents.viewed", [make_document("a")])

    res = client.get("/documents/viewed", headers=HEADERS)

    assert [item["id"] for item in res.json()["documents"]] == ["a"]
    assert len(backend.calls_to("documents.viewed")) == 1


def test_starred_and_drafts(client, root_store):
    root_store.documents.add(make_document("a", starred=True, title="Zulu"))
    root_store.documents.add(make_document("b", starred=True, title="Alpha"))
    root_store.documents.add(make_document("c", publishedAt=None))

    starred = client.get("/documents/starred", headers=HEADERS).json()
    alphabetical = client.get("/documents/starred", params={"alphabetical": True}, headers=HEADERS).json()
    drafts = client.get("/documents/drafts", headers=HEADERS).json()

    assert [item["id"] for item in starred["documents"]] == ["a", "b"]
    assert [item["id"] for item in alphabetical["documents"]] == ["b", "a"]
    assert [item["id"] for item in drafts["documents"]] == ["c"]


def test_document_fetches_once(client, backend):
    backend.on("documents.info", make_document("a", title="Handbook"))

    first = client.get("/documents/a", headers=HEADERS)
    second = client.get("/documents/a", headers=HEADERS)

    assert first.json()["title"] == "Handbook"
    assert second.status_code == 200
    assert len(backend.calls_to("documents.info")) == 1


def test_unknown_document_is_404(client, backend):
    backend.on("documents.info", status=404, body={"ok": False, "message": "Not found"})
    assert client.get("/documents/missing", headers=HEADERS).status_code == 404


def test_collection_documents_in_requested_order(client, root_store):
    root_store.documents.add(make_document("a", collectionId="X", title="Item 10", updatedAt=at(3)))
    root_store.documents.add(make_document("b", collectionId="X", title="Item 9", updatedAt=at(1)))

    recent = client.get("/collections/X/documents", headers=HEADERS).json()
    alphabetical = client.get("/collections/X/documents", params={"order": "alphabetical"}, headers=HEADERS).json()

    assert [item["id"] for item in recent["documents"]] == ["a", "b"]
    assert [item["id"] for item in alphabetical["documents"]] == ["b", "a"]


def test_search_returns_merged_pages(client, backend):
    backend.on("documents.search", [{"ranking": 0.9, "context": "first", "document": make_document("a")}])
    client.get("/search", params={"query": "tea", "offset": 0, "limit": 1}, headers=HEADERS)

    backend.on("documents.search", [{"ranking": 0.5, "context": "second", "document": make_document("b")}])
    res = client.get("/search", params={"query": "tea", "offset": 1, "limit": 1}, headers=HEADERS)

    body = res.json()
    assert body["total"] == 2
    assert [item["document"]["id"] for item in body["results"]] == ["a", "b"]
    assert body["results"][1]["context"] == "second"


def test_search_without_data_is_502(client, backend):
    backend.on("documents.search", body={"ok": True})
    res = client.get("/search", params={"query": "tea"}, headers=HEADERS)
    assert res.status_code == 502


def test_backend_failure_on_document_is_502(client, backend):
    backend.on("documents.info", body={"ok": True})
    assert client.get("/documents/a", headers=HEADERS).status_code == 502

    backend.on("documents.info", status=500, body={"ok": False, "message": "boom"})
    assert client.get("/documents/a", headers=HEADERS).status_code == 502


def test_search_backend_errors_are_mapped(client, backend):
    backend.on("documents.search", status=500, body={"ok": False, "message": "boom"})
    assert client.get("/search", params={"query": "tea"}, headers=HEADERS).status_code == 502

    backend.on("documents.search", status=403, body={"ok": False, "message": "forbidden"})
    assert client.get("/search", params={"query": "tea"}, headers=HEADERS).status_code == 404


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    previous_handlers, previous_level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = previous_handlers
    root.setLevel(previous_level)


def test_lifespan_boots_client_and_wires_stores(env, backend, monkeypatch, tmp_path, restore_root_logging):
    monkeypatch.setenv("ROOT_DIR", str(tmp_path))
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setattr(
        api_app, "ApiClientManager", functools.partial(ApiClientManager, transport=httpx.MockTransport(backend.handle))
    )
    backend.on("auth.info", {"user": {"id": "user-1"}})
    backend.on("documents.info", make_document("a", title="Handbook"))

    with TestClient(app) as lifespan_client:
        root_store = app.state.root_store
        assert isinstance(root_store, RootStore)
        assert len(backend.calls_to("auth.info")) == 1

        res = lifespan_client.get("/documents/a", headers=HEADERS)
        assert res.json()["title"] == "Handbook"
        assert root_store.documents.get("a").title == "Handbook"

    assert root_store.client._client is None
    assert (tmp_path / "logs" / "app.log").exists()
