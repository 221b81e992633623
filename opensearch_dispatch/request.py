"""Request descriptors and their query-string parameters.

A request is a small mutable builder: build it directly, or let a client
method build a default one and hand it to a selector callback. Each request
family owns a :class:`RequestParameters` model describing the query-string
options its endpoint accepts.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Iterable, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .exceptions import InvalidRequestError
from .infer import IndexName

IndexRef = Union[IndexName, str, type, None]
Resolve = Callable[[IndexRef], Optional[str]]


class RequestParameters(BaseModel):
    """Query-string parameters for one endpoint family."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    def to_params(self) -> dict[str, str]:
        """Render set fields the way the HTTP layer expects them."""
        params: dict[str, str] = {}
        for key, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            else:
                params[key] = str(value)
        return params


class CreateIndexRequestParameters(RequestParameters):
    timeout: Optional[str] = None
    master_timeout: Optional[str] = None
    wait_for_active_shards: Optional[Union[int, str]] = None


class DeleteIndexRequestParameters(RequestParameters):
    timeout: Optional[str] = None
    master_timeout: Optional[str] = None
    ignore_unavailable: Optional[bool] = None
    allow_no_indices: Optional[bool] = None


class IndexExistsRequestParameters(RequestParameters):
    ignore_unavailable: Optional[bool] = None
    allow_no_indices: Optional[bool] = None
    local: Optional[bool] = None
    expand_wildcards: Optional[str] = None


class RefreshRequestParameters(RequestParameters):
    ignore_unavailable: Optional[bool] = None
    allow_no_indices: Optional[bool] = None
    expand_wildcards: Optional[str] = None


class IndexRequestParameters(RequestParameters):
    refresh: Optional[Union[bool, str]] = None
    routing: Optional[str] = None
    op_type: Optional[str] = None
    timeout: Optional[str] = None
    pipeline: Optional[str] = None


class GetRequestParameters(RequestParameters):
    routing: Optional[str] = None
    preference: Optional[str] = None
    realtime: Optional[bool] = None
    refresh: Optional[bool] = None


class UpdateRequestParameters(RequestParameters):
    refresh: Optional[Union[bool, str]] = None
    routing: Optional[str] = None
    retry_on_conflict: Optional[int] = None
    timeout: Optional[str] = None


class DeleteRequestParameters(RequestParameters):
    refresh: Optional[Union[bool, str]] = None
    routing: Optional[str] = None
    timeout: Optional[str] = None


class BulkRequestParameters(RequestParameters):
    refresh: Optional[Union[bool, str]] = None
    routing: Optional[str] = None
    timeout: Optional[str] = None
    pipeline: Optional[str] = None


class SearchRequestParameters(RequestParameters):
    routing: Optional[str] = None
    preference: Optional[str] = None
    timeout: Optional[str] = None
    search_type: Optional[str] = None
    request_cache: Optional[bool] = None
    track_total_hits: Optional[Union[bool, int]] = None


class CountRequestParameters(RequestParameters):
    routing: Optional[str] = None
    preference: Optional[str] = None
    q: Optional[str] = None


class CreateRepositoryRequestParameters(RequestParameters):
    master_timeout: Optional[str] = None
    timeout: Optional[str] = None
    verify: Optional[bool] = None


class SnapshotRequestParameters(RequestParameters):
    master_timeout: Optional[str] = None
    wait_for_completion: Optional[bool] = None


class RestoreRequestParameters(RequestParameters):
    master_timeout: Optional[str] = None
    wait_for_completion: Optional[bool] = None


class SnapshotStatusRequestParameters(RequestParameters):
    master_timeout: Optional[str] = None
    ignore_unavailable: Optional[bool] = None


def _as_source(document: Any) -> Any:
    """Serialize a document for the wire; pydantic models are dumped as JSON."""
    if isinstance(document, BaseModel):
        return document.model_dump(mode="json")
    return document


class Request:
    """Base descriptor: an optional index reference plus typed parameters."""

    parameters_cls: ClassVar[type[RequestParameters]] = RequestParameters
    required_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, index: IndexRef = None, **params: Any) -> None:
        self.index: Optional[IndexName] = IndexName.of(index)
        try:
            self.parameters = self.parameters_cls(**params)
        except ValidationError as exc:
            raise InvalidRequestError(f"Invalid parameters for {type(self).__name__}: {exc}") from exc

    def with_index(self, index: IndexRef) -> "Request":
        self.index = IndexName.of(index)
        return self

    def with_params(self, **params: Any) -> "Request":
        for key, value in params.items():
            # unknown names raise a plain ValueError, bad values a ValidationError
            try:
                setattr(self.parameters, key, value)
            except ValueError as exc:
                raise InvalidRequestError(
                    f"Invalid parameter {key!r} for {type(self).__name__}: {exc}"
                ) from exc
        return self

    def validate(self) -> None:
        """Raise :class:`InvalidRequestError` when a required field is unset."""
        for name in self.required_fields:
            value = getattr(self, name, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise InvalidRequestError(
                    f"{type(self).__name__} requires {name!r} to be set"
                )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(index={self.index!s}, params={self.parameters.to_params()})"


class CreateIndexRequest(Request):
    parameters_cls = CreateIndexRequestParameters

    def __init__(
        self,
        index: IndexRef = None,
        settings: Optional[dict[str, Any]] = None,
        mappings: Optional[dict[str, Any]] = None,
        aliases: Optional[dict[str, Any]] = None,
        **params: Any,
    ) -> None:
        super().__init__(index, **params)
        self.index_settings: dict[str, Any] = dict(settings) if settings else {}
        self.index_mappings: dict[str, Any] = dict(mappings) if mappings else {}
        self.index_aliases: dict[str, Any] = dict(aliases) if aliases else {}

    def settings(self, **settings: Any) -> "CreateIndexRequest":
        self.index_settings.update(settings)
        return self

    def shards(self, number_of_shards: int) -> "CreateIndexRequest":
        self.index_settings["number_of_shards"] = number_of_shards
        return self

    def replicas(self, number_of_replicas: int) -> "CreateIndexRequest":
        self.index_settings["number_of_replicas"] = number_of_replicas
        return self

    def mappings(self, mappings: dict[str, Any]) -> "CreateIndexRequest":
        self.index_mappings = dict(mappings)
        return self

    def alias(self, name: str, **definition: Any) -> "CreateIndexRequest":
        self.index_aliases[name] = definition
        return self

    @property
    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.index_settings:
            body["settings"] = self.index_settings
        if self.index_mappings:
            body["mappings"] = self.index_mappings
        if self.index_aliases:
            body["aliases"] = self.index_aliases
        return body


class DeleteIndexRequest(Request):
    parameters_cls = DeleteIndexRequestParameters


class IndexExistsRequest(Request):
    parameters_cls = IndexExistsRequestParameters


class RefreshRequest(Request):
    parameters_cls = RefreshRequestParameters


class IndexRequest(Request):
    """Index (insert or replace) one document.

    When no index is given and the document is an instance of a class, the
    document's class is used as the index reference so that per-type
    defaults apply.
    """

    parameters_cls = IndexRequestParameters
    required_fields = ("document",)

    def __init__(
        self,
        document: Any = None,
        index: IndexRef = None,
        id: Optional[str] = None,
        **params: Any,
    ) -> None:
        super().__init__(index, **params)
        self.document = document
        self.id = id

    def with_document(self, document: Any) -> "IndexRequest":
        self.document = document
        return self

    def with_id(self, id: str) -> "IndexRequest":
        self.id = id
        return self

    def index_reference(self) -> IndexRef:
        if self.index is None and self.document is not None and not isinstance(self.document, dict):
            return IndexName.from_type(type(self.document))
        return self.index

    @property
    def body(self) -> Any:
        return _as_source(self.document)


class GetRequest(Request):
    parameters_cls = GetRequestParameters
    required_fields = ("id",)

    def __init__(self, id: Optional[str] = None, index: IndexRef = None, **params: Any) -> None:
        super().__init__(index, **params)
        self.id = id

    def with_id(self, id: str) -> "GetRequest":
        self.id = id
        return self


class UpdateRequest(Request):
    """Partial update; ``upsert=True`` creates the document when missing."""

    parameters_cls = UpdateRequestParameters
    required_fields = ("id", "doc")

    def __init__(
        self,
        id: Optional[str] = None,
        doc: Any = None,
        index: IndexRef = None,
        upsert: bool = False,
        **params: Any,
    ) -> None:
        super().__init__(index, **params)
        self.id = id
        self.doc = doc
        self.upsert = upsert

    def with_id(self, id: str) -> "UpdateRequest":
        self.id = id
        return self

    def with_doc(self, doc: Any, upsert: Optional[bool] = None) -> "UpdateRequest":
        self.doc = doc
        if upsert is not None:
            self.upsert = upsert
        return self

    @property
    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"doc": _as_source(self.doc)}
        if self.upsert:
            body["doc_as_upsert"] = True
        return body


class DeleteRequest(Request):
    parameters_cls = DeleteRequestParameters
    required_fields = ("id",)

    def __init__(self, id: Optional[str] = None, index: IndexRef = None, **params: Any) -> None:
        super().__init__(index, **params)
        self.id = id

    def with_id(self, id: str) -> "DeleteRequest":
        self.id = id
        return self


class BulkRequest(Request):
    """A batch of index and delete operations.

    Operations without their own index fall back to the request's index,
    and when that is unset too, to the document's type or the default.
    """

    parameters_cls = BulkRequestParameters

    def __init__(self, index: IndexRef = None, **params: Any) -> None:
        super().__init__(index, **params)
        self.operations: list[tuple[str, IndexRef, Optional[str], Any]] = []

    def add_index(
        self, document: Any, id: Optional[str] = None, index: IndexRef = None
    ) -> "BulkRequest":
        self.operations.append(("index", IndexName.of(index), id, document))
        return self

    def add_delete(self, id: str, index: IndexRef = None) -> "BulkRequest":
        self.operations.append(("delete", IndexName.of(index), id, None))
        return self

    def index_many(
        self,
        documents: Iterable[Any],
        index: IndexRef = None,
        id_field: Optional[str] = None,
    ) -> "BulkRequest":
        """Queue an index operation per document.

        If *id_field* is set and present, ``doc[id_field]`` becomes the
        document ``_id``.
        """
        for document in documents:
            source = _as_source(document)
            doc_id = None
            if id_field and isinstance(source, dict) and id_field in source:
                doc_id = str(source[id_field])
            self.add_index(document, id=doc_id, index=index)
        return self

    def chunks(self, size: int) -> list["BulkRequest"]:
        """Split into requests of at most *size* operations each."""
        if size <= 0:
            raise InvalidRequestError("Bulk chunk size must be positive")
        chunked = []
        for start in range(0, len(self.operations), size):
            part = BulkRequest(self.index, **self.parameters.model_dump(exclude_none=True))
            part.operations = self.operations[start : start + size]
            chunked.append(part)
        return chunked

    def validate(self) -> None:
        super().validate()
        if not self.operations:
            raise InvalidRequestError("BulkRequest has no operations")

    def build_body(self, resolve: Resolve) -> list[dict[str, Any]]:
        """Render NDJSON action/source lines, resolving each operation's index."""
        lines: list[dict[str, Any]] = []
        for action, index, doc_id, document in self.operations:
            reference = index or self.index
            if reference is None and document is not None and not isinstance(document, dict):
                reference = IndexName.from_type(type(document))
            meta: dict[str, Any] = {}
            resolved = resolve(reference)
            if resolved:
                meta["_index"] = resolved
            if doc_id is not None:
                meta["_id"] = doc_id
            lines.append({action: meta})
            if action == "index":
                lines.append(_as_source(document))
        return lines


class SearchRequest(Request):
    parameters_cls = SearchRequestParameters

    def __init__(
        self,
        index: IndexRef = None,
        query: Optional[dict[str, Any]] = None,
        **params: Any,
    ) -> None:
        super().__init__(index, **params)
        self.body: dict[str, Any] = {}
        if query is not None:
            self.body["query"] = query

    def query(self, query: dict[str, Any]) -> "SearchRequest":
        self.body["query"] = query
        return self

    def match(self, field: str, text: str) -> "SearchRequest":
        return self.query({"match": {field: text}})

    def term(self, field: str, value: Any) -> "SearchRequest":
        return self.query({"term": {field: value}})

    def size(self, size: int) -> "SearchRequest":
        self.body["size"] = size
        return self

    def from_(self, offset: int) -> "SearchRequest":
        self.body["from"] = offset
        return self

    def sort(self, *clauses: Union[str, dict[str, Any]]) -> "SearchRequest":
        self.body.setdefault("sort", []).extend(clauses)
        return self

    def source(self, fields: Union[bool, Sequence[str]]) -> "SearchRequest":
        self.body["_source"] = fields if isinstance(fields, bool) else list(fields)
        return self

    def aggregation(self, name: str, aggregation: dict[str, Any]) -> "SearchRequest":
        self.body.setdefault("aggs", {})[name] = aggregation
        return self


class CountRequest(Request):
    parameters_cls = CountRequestParameters

    def __init__(
        self,
        index: IndexRef = None,
        query: Optional[dict[str, Any]] = None,
        **params: Any,
    ) -> None:
        super().__init__(index, **params)
        self.count_query = query

    def query(self, query: dict[str, Any]) -> "CountRequest":
        self.count_query = query
        return self

    @property
    def body(self) -> dict[str, Any]:
        if self.count_query is None:
            return {}
        return {"query": self.count_query}


class CreateRepositoryRequest(Request):
    parameters_cls = CreateRepositoryRequestParameters
    required_fields = ("repository",)

    def __init__(
        self,
        repository: Optional[str] = None,
        type: str = "fs",
        settings: Optional[dict[str, Any]] = None,
        **params: Any,
    ) -> None:
        super().__init__(None, **params)
        self.repository = repository
        self.repository_type = type
        self.repository_settings: dict[str, Any] = dict(settings) if settings else {}

    def location(self, path: str) -> "CreateRepositoryRequest":
        self.repository_settings["location"] = path
        return self

    @property
    def body(self) -> dict[str, Any]:
        return {"type": self.repository_type, "settings": self.repository_settings}


class _SnapshotRequestBase(Request):
    required_fields = ("repository", "snapshot")

    def __init__(
        self,
        repository: Optional[str] = None,
        snapshot: Optional[str] = None,
        indices: Optional[Sequence[IndexRef]] = None,
        **params: Any,
    ) -> None:
        super().__init__(None, **params)
        self.repository = repository
        self.snapshot = snapshot
        self.indices: list[IndexName] = [IndexName.of(i) for i in indices or ()]

    def with_indices(self, *indices: IndexRef) -> "_SnapshotRequestBase":
        self.indices = [IndexName.of(i) for i in indices]
        return self

    def resolve_indices(self, resolve: Resolve) -> Optional[str]:
        if not self.indices:
            return None
        return ",".join(name for name in (resolve(i) for i in self.indices) if name)


class SnapshotRequest(_SnapshotRequestBase):
    parameters_cls = SnapshotRequestParameters

    def build_body(self, resolve: Resolve) -> dict[str, Any]:
        body: dict[str, Any] = {}
        indices = self.resolve_indices(resolve)
        if indices:
            body["indices"] = indices
        return body


class RestoreRequest(_SnapshotRequestBase):
    parameters_cls = RestoreRequestParameters

    def __init__(self, *args: Any, rename_pattern: Optional[str] = None,
                 rename_replacement: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.rename_pattern = rename_pattern
        self.rename_replacement = rename_replacement

    def rename(self, pattern: str, replacement: str) -> "RestoreRequest":
        self.rename_pattern = pattern
        self.rename_replacement = replacement
        return self

    def build_body(self, resolve: Resolve) -> dict[str, Any]:
        body: dict[str, Any] = {}
        indices = self.resolve_indices(resolve)
        if indices:
            body["indices"] = indices
        if self.rename_pattern is not None:
            body["rename_pattern"] = self.rename_pattern
            body["rename_replacement"] = self.rename_replacement or ""
        return body


class SnapshotStatusRequest(Request):
    """Status of running snapshots, or of one repository / snapshot."""

    parameters_cls = SnapshotStatusRequestParameters

    def __init__(
        self,
        repository: Optional[str] = None,
        snapshot: Optional[str] = None,
        **params: Any,
    ) -> None:
        super().__init__(None, **params)
        self.repository = repository
        self.snapshot = snapshot

    def validate(self) -> None:
        super().validate()
        if self.snapshot is not None and self.repository is None:
            raise InvalidRequestError("SnapshotStatusRequest needs a repository to name a snapshot")
