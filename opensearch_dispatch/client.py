"""Typed OpenSearch clients and transport factories.

Each client method accepts a request, a selector callback that receives a
fresh default request, or nothing. The method hands the effective request to
the dispatcher together with a closure naming the low-level endpoint.
"""

import logging
from typing import Any, Callable, Iterator, Optional, Union

from opensearchpy import AsyncOpenSearch, OpenSearch

from .connection_settings import ConnectionConfig, load_config
from .dispatcher import Dispatcher, invoke_or_default
from .exceptions import InvalidRequestError
from .infer import IndexName, IndexNameResolver
from .low_level import LowLevelDispatch
from .request import (
    BulkRequest,
    CountRequest,
    CreateIndexRequest,
    CreateRepositoryRequest,
    DeleteIndexRequest,
    DeleteRequest,
    GetRequest,
    IndexExistsRequest,
    IndexRequest,
    RefreshRequest,
    Request,
    RestoreRequest,
    SearchRequest,
    SnapshotRequest,
    SnapshotStatusRequest,
    UpdateRequest,
)
from .response import (
    AcknowledgedResponse,
    BulkResponse,
    CountResponse,
    ExistsResponse,
    GetResponse,
    IndexResponse,
    SearchResponse,
    ShardsResponse,
    SnapshotResponse,
    SnapshotStatusResponse,
)

logger = logging.getLogger(__name__)

RequestOrSelector = Union[Request, Callable[[Any], Any], None]


def _resolve_config(config: Optional[ConnectionConfig], overrides: dict) -> ConnectionConfig:
    if config is None:
        return load_config(**overrides)
    if overrides:
        raise TypeError("Pass either a ConnectionConfig or keyword overrides, not both")
    return config


def create_transport(config: Optional[ConnectionConfig] = None, **overrides) -> OpenSearch:
    """Create and return a blocking opensearch-py client.

    Args:
        config: An explicit :class:`ConnectionConfig`.  When ``None``,
            one is built via :func:`load_config` (env vars + *overrides*).
        **overrides: Passed to :func:`load_config` when *config* is ``None``.
    """
    config = _resolve_config(config, overrides)
    transport = OpenSearch(**config.transport_kwargs())
    logger.info("OpenSearch client initialized for %s:%s", config.host, config.port)
    return transport


def create_async_transport(
    config: Optional[ConnectionConfig] = None, **overrides
) -> AsyncOpenSearch:
    """Create and return an ``AsyncOpenSearch`` client (needs ``aiohttp``)."""
    config = _resolve_config(config, overrides)
    transport = AsyncOpenSearch(**config.transport_kwargs())
    logger.info("OpenSearch async client initialized for %s:%s", config.host, config.port)
    return transport


class _BaseClient:
    def __init__(self, config: Optional[ConnectionConfig], overrides: dict) -> None:
        self.config = _resolve_config(config, overrides)
        self.infer = IndexNameResolver(self.config)
        self.dispatcher = Dispatcher()

    @staticmethod
    def _request(request: RequestOrSelector, factory: Callable[[], Request]) -> Request:
        if isinstance(request, Request):
            return request
        return invoke_or_default(request, factory)

    def _index(self, reference: Any) -> str:
        """Resolve *reference*; an unresolvable index is a caller error."""
        name = self.infer.resolve(reference)
        if name is None or not name.strip():
            raise InvalidRequestError(
                f"Index name could not be resolved for {IndexName.of(reference)!s} "
                "and no default index is configured"
            )
        return name


class OpenSearchClient(_BaseClient):
    """Blocking typed client."""

    def __init__(
        self,
        config: Optional[ConnectionConfig] = None,
        transport: Optional[Any] = None,
        **overrides,
    ) -> None:
        super().__init__(config, overrides)
        self.transport = transport if transport is not None else create_transport(self.config)
        self.low_level = LowLevelDispatch(self.transport)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "OpenSearchClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # indices

    def create_index(self, request: RequestOrSelector = None) -> AcknowledgedResponse:
        return self.dispatcher.dispatch(
            self._request(request, CreateIndexRequest),
            AcknowledgedResponse,
            lambda p, r: self.low_level.indices_create_dispatch(
                AcknowledgedResponse, self._index(r.index), p, r.body
            ),
        )

    def delete_index(self, request: RequestOrSelector = None) -> AcknowledgedResponse:
        return self.dispatcher.dispatch(
            self._request(request, DeleteIndexRequest),
            AcknowledgedResponse,
            lambda p, r: self.low_level.indices_delete_dispatch(
                AcknowledgedResponse, self._index(r.index), p
            ),
        )

    def index_exists(self, request: RequestOrSelector = None) -> ExistsResponse:
        return self.dispatcher.dispatch(
            self._request(request, IndexExistsRequest),
            ExistsResponse,
            lambda p, r: self.low_level.indices_exists_dispatch(
                ExistsResponse, self._index(r.index), p
            ),
        )

    def refresh(self, request: RequestOrSelector = None) -> ShardsResponse:
        """Refresh one index, or every index when none resolves."""
        return self.dispatcher.dispatch(
            self._request(request, RefreshRequest),
            ShardsResponse,
            lambda p, r: self.low_level.indices_refresh_dispatch(
                ShardsResponse, self.infer.resolve(r.index), p
            ),
        )

    # documents

    def index_document(self, request: RequestOrSelector = None) -> IndexResponse:
        return self.dispatcher.dispatch(
            self._request(request, IndexRequest),
            IndexResponse,
            lambda p, r: self.low_level.index_dispatch(
                IndexResponse, self._index(r.index_reference()), p, r.body, id=r.id
            ),
        )

    def get_document(self, request: RequestOrSelector = None) -> GetResponse:
        return self.dispatcher.dispatch(
            self._request(request, GetRequest),
            GetResponse,
            lambda p, r: self.low_level.get_dispatch(GetResponse, self._index(r.index), r.id, p),
        )

    def update_document(self, request: RequestOrSelector = None) -> IndexResponse:
        return self.dispatcher.dispatch(
            self._request(request, UpdateRequest),
            IndexResponse,
            lambda p, r: self.low_level.update_dispatch(
                IndexResponse, self._index(r.index), r.id, p, r.body
            ),
        )

    def delete_document(self, request: RequestOrSelector = None) -> IndexResponse:
        return self.dispatcher.dispatch(
            self._request(request, DeleteRequest),
            IndexResponse,
            lambda p, r: self.low_level.delete_dispatch(IndexResponse, self._index(r.index), r.id, p),
        )

    def bulk(self, request: RequestOrSelector = None) -> BulkResponse:
        return self.dispatcher.dispatch(
            self._request(request, BulkRequest),
            BulkResponse,
            lambda p, r: self.low_level.bulk_dispatch(BulkResponse, p, r.build_body(self._index)),
        )

    def bulk_all(self, request: RequestOrSelector = None) -> Iterator[BulkResponse]:
        """Send a bulk request in chunks of ``config.bulk_chunk`` operations."""
        full = self._request(request, BulkRequest)
        full.validate()
        for chunk in full.chunks(self.config.bulk_chunk):
            response = self.bulk(chunk)
            if not response.is_valid or response.errors:
                logger.error("Bulk chunk failed: %d item errors", len(response.item_errors()))
            yield response

    # search

    def search(self, request: RequestOrSelector = None) -> SearchResponse:
        return self.dispatcher.dispatch(
            self._request(request, SearchRequest),
            SearchResponse,
            lambda p, r: self.low_level.search_dispatch(SearchResponse, self._index(r.index), p, r.body),
        )

    def count(self, request: RequestOrSelector = None) -> CountResponse:
        return self.dispatcher.dispatch(
            self._request(request, CountRequest),
            CountResponse,
            lambda p, r: self.low_level.count_dispatch(CountResponse, self._index(r.index), p, r.body),
        )

    # snapshot and restore

    def create_repository(self, request: RequestOrSelector = None) -> AcknowledgedResponse:
        return self.dispatcher.dispatch(
            self._request(request, CreateRepositoryRequest),
            AcknowledgedResponse,
            lambda p, r: self.low_level.snapshot_create_repository_dispatch(
                AcknowledgedResponse, r.repository, p, r.body
            ),
        )

    def snapshot(self, request: RequestOrSelector = None) -> SnapshotResponse:
        return self.dispatcher.dispatch(
            self._request(request, SnapshotRequest),
            SnapshotResponse,
            lambda p, r: self.low_level.snapshot_create_dispatch(
                SnapshotResponse, r.repository, r.snapshot, p, r.build_body(self._index)
            ),
        )

    def restore(self, request: RequestOrSelector = None) -> SnapshotResponse:
        return self.dispatcher.dispatch(
            self._request(request, RestoreRequest),
            SnapshotResponse,
            lambda p, r: self.low_level.snapshot_restore_dispatch(
                SnapshotResponse, r.repository, r.snapshot, p, r.build_body(self._index)
            ),
        )

    def snapshot_status(self, request: RequestOrSelector = None) -> SnapshotStatusResponse:
        return self.dispatcher.dispatch(
            self._request(request, SnapshotStatusRequest),
            SnapshotStatusResponse,
            lambda p, r: self.low_level.snapshot_status_dispatch(
                SnapshotStatusResponse, p, repository=r.repository, snapshot=r.snapshot
            ),
        )


class AsyncOpenSearchClient(_BaseClient):
    """Awaitable typed client; mirrors :class:`OpenSearchClient`."""

    def __init__(
        self,
        config: Optional[ConnectionConfig] = None,
        transport: Optional[Any] = None,
        **overrides,
    ) -> None:
        super().__init__(config, overrides)
        self.transport = transport if transport is not None else create_async_transport(self.config)
        self.low_level = LowLevelDispatch(self.transport)

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> "AsyncOpenSearchClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # indices

    async def create_index(self, request: RequestOrSelector = None) -> AcknowledgedResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, CreateIndexRequest),
            AcknowledgedResponse,
            lambda p, r: self.low_level.indices_create_dispatch_async(
                AcknowledgedResponse, self._index(r.index), p, r.body
            ),
        )

    async def delete_index(self, request: RequestOrSelector = None) -> AcknowledgedResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, DeleteIndexRequest),
            AcknowledgedResponse,
            lambda p, r: self.low_level.indices_delete_dispatch_async(
                AcknowledgedResponse, self._index(r.index), p
            ),
        )

    async def index_exists(self, request: RequestOrSelector = None) -> ExistsResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, IndexExistsRequest),
            ExistsResponse,
            lambda p, r: self.low_level.indices_exists_dispatch_async(
                ExistsResponse, self._index(r.index), p
            ),
        )

    async def refresh(self, request: RequestOrSelector = None) -> ShardsResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, RefreshRequest),
            ShardsResponse,
            lambda p, r: self.low_level.indices_refresh_dispatch_async(
                ShardsResponse, self.infer.resolve(r.index), p
            ),
        )

    # documents

    async def index_document(self, request: RequestOrSelector = None) -> IndexResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, IndexRequest),
            IndexResponse,
            lambda p, r: self.low_level.index_dispatch_async(
                IndexResponse, self._index(r.index_reference()), p, r.body, id=r.id
            ),
        )

    async def get_document(self, request: RequestOrSelector = None) -> GetResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, GetRequest),
            GetResponse,
            lambda p, r: self.low_level.get_dispatch_async(GetResponse, self._index(r.index), r.id, p),
        )

    async def update_document(self, request: RequestOrSelector = None) -> IndexResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, UpdateRequest),
            IndexResponse,
            lambda p, r: self.low_level.update_dispatch_async(
                IndexResponse, self._index(r.index), r.id, p, r.body
            ),
        )

    async def delete_document(self, request: RequestOrSelector = None) -> IndexResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, DeleteRequest),
            IndexResponse,
            lambda p, r: self.low_level.delete_dispatch_async(
                IndexResponse, self._index(r.index), r.id, p
            ),
        )

    async def bulk(self, request: RequestOrSelector = None) -> BulkResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, BulkRequest),
            BulkResponse,
            lambda p, r: self.low_level.bulk_dispatch_async(BulkResponse, p, r.build_body(self._index)),
        )

    async def bulk_all(self, request: RequestOrSelector = None) -> list[BulkResponse]:
        full = self._request(request, BulkRequest)
        full.validate()
        responses = []
        for chunk in full.chunks(self.config.bulk_chunk):
            response = await self.bulk(chunk)
            if not response.is_valid or response.errors:
                logger.error("Bulk chunk failed: %d item errors", len(response.item_errors()))
            responses.append(response)
        return responses

    # search

    async def search(self, request: RequestOrSelector = None) -> SearchResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, SearchRequest),
            SearchResponse,
            lambda p, r: self.low_level.search_dispatch_async(
                SearchResponse, self._index(r.index), p, r.body
            ),
        )

    async def count(self, request: RequestOrSelector = None) -> CountResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, CountRequest),
            CountResponse,
            lambda p, r: self.low_level.count_dispatch_async(
                CountResponse, self._index(r.index), p, r.body
            ),
        )

    # snapshot and restore

    async def create_repository(self, request: RequestOrSelector = None) -> AcknowledgedResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, CreateRepositoryRequest),
            AcknowledgedResponse,
            lambda p, r: self.low_level.snapshot_create_repository_dispatch_async(
                AcknowledgedResponse, r.repository, p, r.body
            ),
        )

    async def snapshot(self, request: RequestOrSelector = None) -> SnapshotResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, SnapshotRequest),
            SnapshotResponse,
            lambda p, r: self.low_level.snapshot_create_dispatch_async(
                SnapshotResponse, r.repository, r.snapshot, p, r.build_body(self._index)
            ),
        )

    async def restore(self, request: RequestOrSelector = None) -> SnapshotResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, RestoreRequest),
            SnapshotResponse,
            lambda p, r: self.low_level.snapshot_restore_dispatch_async(
                SnapshotResponse, r.repository, r.snapshot, p, r.build_body(self._index)
            ),
        )

    async def snapshot_status(self, request: RequestOrSelector = None) -> SnapshotStatusResponse:
        return await self.dispatcher.dispatch_async(
            self._request(request, SnapshotStatusRequest),
            SnapshotStatusResponse,
            lambda p, r: self.low_level.snapshot_status_dispatch_async(
                SnapshotStatusResponse, p, repository=r.repository, snapshot=r.snapshot
            ),
        )
