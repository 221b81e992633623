from __future__ import annotations

import asyncio

import pytest
from opensearchpy.exceptions import NotFoundError
from pydantic import BaseModel

import opensearch_dispatch.client as client_module
from opensearch_dispatch import (
    AsyncOpenSearchClient,
    BulkRequest,
    ConnectionConfig,
    IndexRequest,
    InvalidRequestError,
    OpenSearchClient,
    SearchRequest,
    SnapshotStatusRequest,
)


class TypeA(BaseModel):
    title: str


def test_create_async_transport_passes_expected_kwargs(monkeypatch):
    captured = {}

    class DummyAsyncOpenSearch:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    monkeypatch.setattr(client_module, "AsyncOpenSearch", DummyAsyncOpenSearch)

    client_module.create_async_transport(ConnectionConfig(host="os.local", use_ssl=False, timeout=5))

    assert captured["hosts"] == [{"host": "os.local", "port": 9200, "scheme": "http"}]
    assert captured["timeout"] == 5


@pytest.mark.asyncio
async def test_search_matches_sync_client(config, transport, async_transport):
    body = {"hits": {"total": {"value": 1, "relation": "eq"}, "hits": [{"_source": {"title": "x"}}]}}
    transport.responses["search"] = body
    async_transport.responses["search"] = body

    def select(s):
        return s.with_index(TypeA).match("title", "x")

    sync_response = OpenSearchClient(config, transport=transport).search(select)
    async_response = await AsyncOpenSearchClient(config, transport=async_transport).search(select)

    assert sync_response == async_response
    assert transport.calls == async_transport.calls
    assert async_transport.calls[0][1]["index"] == "alpha"


@pytest.mark.asyncio
async def test_async_document_roundtrip(config, async_transport):
    async_transport.responses["index"] = {"_id": "1", "result": "created"}
    async_transport.responses["get"] = {"_id": "1", "found": True, "_source": {"title": "hello"}}
    client = AsyncOpenSearchClient(config, transport=async_transport)

    indexed = await client.index_document(IndexRequest(TypeA(title="hello"), id="1"))
    fetched = await client.get_document(lambda g: g.with_id("1").with_index(TypeA))

    assert indexed.result == "created"
    assert fetched.found is True
    assert fetched.source == {"title": "hello"}
    assert [call[0] for call in async_transport.calls] == ["index", "get"]


@pytest.mark.asyncio
async def test_async_not_found_is_invalid_response(config, async_transport):
    async_transport.responses["indices.delete"] = NotFoundError(
        404, "index_not_found_exception", {"error": {"type": "index_not_found_exception"}}
    )
    client = AsyncOpenSearchClient(config, transport=async_transport)

    response = await client.delete_index(lambda r: r.with_index("gone"))

    assert response.is_valid is False
    assert response.status_code == 404
    assert response.acknowledged is False


@pytest.mark.asyncio
async def test_async_invalid_request_raises(config, async_transport):
    client = AsyncOpenSearchClient(config, transport=async_transport)

    with pytest.raises(InvalidRequestError):
        await client.update_document()
    with pytest.raises(InvalidRequestError):
        await client.snapshot_status(lambda r: None)
    assert async_transport.calls == []


@pytest.mark.asyncio
async def test_async_bulk_all(async_transport):
    async_transport.responses["bulk"] = {"errors": False, "items": []}
    client = AsyncOpenSearchClient(
        ConnectionConfig(default_index="main", bulk_chunk=2), transport=async_transport
    )

    responses = await client.bulk_all(BulkRequest().index_many([{"n": i} for i in range(5)]))

    assert len(responses) == 3
    assert all(response.is_valid for response in responses)


@pytest.mark.asyncio
async def test_async_bulk_all_without_operations_is_invalid(config, async_transport):
    client = AsyncOpenSearchClient(config, transport=async_transport)

    with pytest.raises(InvalidRequestError, match="no operations"):
        await client.bulk_all(BulkRequest())
    assert async_transport.calls == []


@pytest.mark.asyncio
async def test_async_snapshot_status_and_count(config, async_transport):
    async_transport.responses["snapshot.status"] = {"snapshots": []}
    async_transport.responses["count"] = {"count": 3}
    client = AsyncOpenSearchClient(config, transport=async_transport)

    status = await client.snapshot_status(SnapshotStatusRequest("backups"))
    counted = await client.count()

    assert status.snapshots == []
    assert counted.count == 3


@pytest.mark.asyncio
async def test_cancelled_search_is_not_reported_as_success(config):
    started = asyncio.Event()

    class SlowTransport:
        async def search(self, **kwargs):
            started.set()
            await asyncio.sleep(30)
            return {"hits": {"total": {"value": 1}, "hits": []}}

    client = AsyncOpenSearchClient(config, transport=SlowTransport())
    task = asyncio.create_task(client.search(SearchRequest("idx")))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert task.cancelled()


@pytest.mark.asyncio
async def test_async_context_manager_closes_transport(config, async_transport):
    async with AsyncOpenSearchClient(config, transport=async_transport) as client:
        await client.refresh()

    assert async_transport.closed is True
