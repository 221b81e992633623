"""Endpoint calls against an opensearch-py client.

One method per API endpoint, each returning a typed response built from the
raw body. Methods ending in ``_async`` expect an ``AsyncOpenSearch``
transport. Transport faults are not handled here; they propagate to the
dispatcher, which folds them into the response.
"""

from typing import Any, Optional

from .request import RequestParameters
from .response import Response


class LowLevelDispatch:
    """Thin endpoint layer over ``OpenSearch`` / ``AsyncOpenSearch``."""

    def __init__(self, transport: Any) -> None:
        self.transport = transport

    def _endpoint(self, api: str):
        target = self.transport
        for part in api.split("."):
            target = getattr(target, part)
        return target

    def _perform(
        self,
        api: str,
        response_cls: type[Response],
        params: RequestParameters,
        **kwargs: Any,
    ) -> Response:
        body = self._endpoint(api)(params=params.to_params(), **kwargs)
        return response_cls.from_body(body)

    async def _perform_async(
        self,
        api: str,
        response_cls: type[Response],
        params: RequestParameters,
        **kwargs: Any,
    ) -> Response:
        body = await self._endpoint(api)(params=params.to_params(), **kwargs)
        return response_cls.from_body(body)

    # indices

    def indices_create_dispatch(self, response_cls, index: str, params, body: dict[str, Any]):
        return self._perform("indices.create", response_cls, params, index=index, body=body)

    async def indices_create_dispatch_async(self, response_cls, index: str, params, body: dict[str, Any]):
        return await self._perform_async("indices.create", response_cls, params, index=index, body=body)

    def indices_delete_dispatch(self, response_cls, index: str, params):
        return self._perform("indices.delete", response_cls, params, index=index)

    async def indices_delete_dispatch_async(self, response_cls, index: str, params):
        return await self._perform_async("indices.delete", response_cls, params, index=index)

    def indices_exists_dispatch(self, response_cls, index: str, params):
        return self._perform("indices.exists", response_cls, params, index=index)

    async def indices_exists_dispatch_async(self, response_cls, index: str, params):
        return await self._perform_async("indices.exists", response_cls, params, index=index)

    def indices_refresh_dispatch(self, response_cls, index: Optional[str], params):
        return self._perform("indices.refresh", response_cls, params, index=index)

    async def indices_refresh_dispatch_async(self, response_cls, index: Optional[str], params):
        return await self._perform_async("indices.refresh", response_cls, params, index=index)

    # documents

    def index_dispatch(self, response_cls, index: str, params, body: Any, id: Optional[str] = None):
        kwargs: dict[str, Any] = {"index": index, "body": body}
        if id is not None:
            kwargs["id"] = id
        return self._perform("index", response_cls, params, **kwargs)

    async def index_dispatch_async(self, response_cls, index: str, params, body: Any, id: Optional[str] = None):
        kwargs: dict[str, Any] = {"index": index, "body": body}
        if id is not None:
            kwargs["id"] = id
        return await self._perform_async("index", response_cls, params, **kwargs)

    def get_dispatch(self, response_cls, index: str, id: str, params):
        return self._perform("get", response_cls, params, index=index, id=id)

    async def get_dispatch_async(self, response_cls, index: str, id: str, params):
        return await self._perform_async("get", response_cls, params, index=index, id=id)

    def update_dispatch(self, response_cls, index: str, id: str, params, body: dict[str, Any]):
        return self._perform("update", response_cls, params, index=index, id=id, body=body)

    async def update_dispatch_async(self, response_cls, index: str, id: str, params, body: dict[str, Any]):
        return await self._perform_async("update", response_cls, params, index=index, id=id, body=body)

    def delete_dispatch(self, response_cls, index: str, id: str, params):
        return self._perform("delete", response_cls, params, index=index, id=id)

    async def delete_dispatch_async(self, response_cls, index: str, id: str, params):
        return await self._perform_async("delete", response_cls, params, index=index, id=id)

    def bulk_dispatch(self, response_cls, params, body: list[dict[str, Any]]):
        return self._perform("bulk", response_cls, params, body=body)

    async def bulk_dispatch_async(self, response_cls, params, body: list[dict[str, Any]]):
        return await self._perform_async("bulk", response_cls, params, body=body)

    # search

    def search_dispatch(self, response_cls, index: str, params, body: dict[str, Any]):
        return self._perform("search", response_cls, params, index=index, body=body)

    async def search_dispatch_async(self, response_cls, index: str, params, body: dict[str, Any]):
        return await self._perform_async("search", response_cls, params, index=index, body=body)

    def count_dispatch(self, response_cls, index: str, params, body: dict[str, Any]):
        return self._perform("count", response_cls, params, index=index, body=body)

    async def count_dispatch_async(self, response_cls, index: str, params, body: dict[str, Any]):
        return await self._perform_async("count", response_cls, params, index=index, body=body)

    # snapshot and restore

    def snapshot_create_repository_dispatch(self, response_cls, repository: str, params, body: dict[str, Any]):
        return self._perform(
            "snapshot.create_repository", response_cls, params, repository=repository, body=body
        )

    async def snapshot_create_repository_dispatch_async(
        self, response_cls, repository: str, params, body: dict[str, Any]
    ):
        return await self._perform_async(
            "snapshot.create_repository", response_cls, params, repository=repository, body=body
        )

    def snapshot_create_dispatch(self, response_cls, repository: str, snapshot: str, params, body: dict[str, Any]):
        return self._perform(
            "snapshot.create", response_cls, params, repository=repository, snapshot=snapshot, body=body
        )

    async def snapshot_create_dispatch_async(
        self, response_cls, repository: str, snapshot: str, params, body: dict[str, Any]
    ):
        return await self._perform_async(
            "snapshot.create", response_cls, params, repository=repository, snapshot=snapshot, body=body
        )

    def snapshot_restore_dispatch(self, response_cls, repository: str, snapshot: str, params, body: dict[str, Any]):
        return self._perform(
            "snapshot.restore", response_cls, params, repository=repository, snapshot=snapshot, body=body
        )

    async def snapshot_restore_dispatch_async(
        self, response_cls, repository: str, snapshot: str, params, body: dict[str, Any]
    ):
        return await self._perform_async(
            "snapshot.restore", response_cls, params, repository=repository, snapshot=snapshot, body=body
        )

    def snapshot_status_dispatch(
        self, response_cls, params, repository: Optional[str] = None, snapshot: Optional[str] = None
    ):
        return self._perform(
            "snapshot.status", response_cls, params, repository=repository, snapshot=snapshot
        )

    async def snapshot_status_dispatch_async(
        self, response_cls, params, repository: Optional[str] = None, snapshot: Optional[str] = None
    ):
        return await self._perform_async(
            "snapshot.status", response_cls, params, repository=repository, snapshot=snapshot
        )
