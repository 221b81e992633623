"""Typed OpenSearch client: index name inference and request dispatch."""

import logging

from .client import (
    AsyncOpenSearchClient,
    OpenSearchClient,
    create_async_transport,
    create_transport,
)
from .connection_settings import ConnectionConfig, load_config, type_key
from .dispatcher import Dispatcher, invoke_or_default
from .exceptions import ConfigurationError, InvalidRequestError, OpenSearchDispatchError
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
    RequestParameters,
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
    Response,
    SearchResponse,
    ShardsResponse,
    SnapshotResponse,
    SnapshotStatusResponse,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # client
    "OpenSearchClient",
    "AsyncOpenSearchClient",
    "create_transport",
    "create_async_transport",
    # config
    "ConnectionConfig",
    "load_config",
    "type_key",
    # inference
    "IndexName",
    "IndexNameResolver",
    # dispatch
    "Dispatcher",
    "invoke_or_default",
    "LowLevelDispatch",
    # errors
    "OpenSearchDispatchError",
    "ConfigurationError",
    "InvalidRequestError",
    # requests
    "Request",
    "RequestParameters",
    "CreateIndexRequest",
    "DeleteIndexRequest",
    "IndexExistsRequest",
    "RefreshRequest",
    "IndexRequest",
    "GetRequest",
    "UpdateRequest",
    "DeleteRequest",
    "BulkRequest",
    "SearchRequest",
    "CountRequest",
    "CreateRepositoryRequest",
    "SnapshotRequest",
    "RestoreRequest",
    "SnapshotStatusRequest",
    # responses
    "Response",
    "AcknowledgedResponse",
    "ExistsResponse",
    "ShardsResponse",
    "IndexResponse",
    "GetResponse",
    "SearchResponse",
    "CountResponse",
    "BulkResponse",
    "SnapshotResponse",
    "SnapshotStatusResponse",
]
