"""Typed responses.

Every response carries the same validity metadata so callers can branch on
``response.is_valid`` instead of catching exceptions. Transport faults such
as "index not found" are folded into the response rather than raised.
"""

from typing import Any, Optional

from opensearchpy.exceptions import OpenSearchException, TransportError
from pydantic import BaseModel, Field


class Response(BaseModel):
    """Base response: validity flag, HTTP status and the raw body."""

    is_valid: bool = True
    status_code: Optional[int] = 200
    error: Optional[Any] = None
    exception: Optional[str] = None
    body: Any = Field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Any, status_code: int = 200) -> "Response":
        return cls(is_valid=True, status_code=status_code, body=body if body is not None else {})

    @classmethod
    def from_transport_error(cls, exc: OpenSearchException) -> "Response":
        """Build an invalid response describing *exc*.

        ``status_code`` is ``None`` for faults that never reached the server
        (connection errors report ``"N/A"``) and for serialization failures.
        """
        if isinstance(exc, TransportError):
            status = exc.status_code if isinstance(exc.status_code, int) else None
            info = exc.info if isinstance(exc.info, dict) else None
            error = info.get("error", exc.error) if info else exc.error
        else:
            status, info, error = None, None, str(exc)
        return cls(
            is_valid=False,
            status_code=status,
            error=error,
            exception=type(exc).__name__,
            body=info or {},
        )

    def _get(self, key: str, default: Any = None) -> Any:
        if isinstance(self.body, dict):
            return self.body.get(key, default)
        return default


class AcknowledgedResponse(Response):
    """Index create/delete and repository registration."""

    @property
    def acknowledged(self) -> bool:
        return bool(self._get("acknowledged", False))


class ExistsResponse(Response):
    @classmethod
    def from_body(cls, body: Any, status_code: Optional[int] = None) -> "ExistsResponse":
        # HEAD requests come back from the transport as a bare bool.
        exists = bool(body)
        status = status_code if status_code is not None else (200 if exists else 404)
        return cls(is_valid=True, status_code=status, body={"exists": exists})

    @property
    def exists(self) -> bool:
        return bool(self._get("exists", False))


class ShardsResponse(Response):
    @property
    def shards(self) -> dict[str, Any]:
        return self._get("_shards", {})


class IndexResponse(Response):
    """Result of indexing, updating or deleting a single document."""

    @property
    def id(self) -> Optional[str]:
        return self._get("_id")

    @property
    def index(self) -> Optional[str]:
        return self._get("_index")

    @property
    def result(self) -> Optional[str]:
        return self._get("result")

    @property
    def version(self) -> Optional[int]:
        return self._get("_version")


class GetResponse(Response):
    @property
    def id(self) -> Optional[str]:
        return self._get("_id")

    @property
    def found(self) -> bool:
        return bool(self._get("found", False))

    @property
    def source(self) -> Optional[dict[str, Any]]:
        return self._get("_source")


class SearchResponse(Response):
    @property
    def took(self) -> Optional[int]:
        return self._get("took")

    @property
    def hits(self) -> list[dict[str, Any]]:
        return self._get("hits", {}).get("hits", [])

    @property
    def total(self) -> int:
        total = self._get("hits", {}).get("total", 0)
        # 7.x returns {"value": n, "relation": "eq"}, older clusters a bare int.
        if isinstance(total, dict):
            return int(total.get("value", 0))
        return int(total or 0)

    @property
    def aggregations(self) -> dict[str, Any]:
        return self._get("aggregations", {})

    def documents(self) -> list[dict[str, Any]]:
        return [hit.get("_source", {}) for hit in self.hits]


class CountResponse(Response):
    @property
    def count(self) -> int:
        return int(self._get("count", 0))


class BulkResponse(Response):
    @property
    def errors(self) -> bool:
        return bool(self._get("errors", False))

    @property
    def items(self) -> list[dict[str, Any]]:
        return self._get("items", [])

    def item_errors(self) -> list[dict[str, Any]]:
        """Return the per-item results that carry an error."""
        failed = []
        for item in self.items:
            for result in item.values():
                if "error" in result:
                    failed.append(result)
        return failed


class SnapshotResponse(Response):
    """Snapshot create and restore."""

    @property
    def accepted(self) -> bool:
        # wait_for_completion=true returns the snapshot instead of the flag
        return bool(self._get("accepted", False)) or self.snapshot is not None

    @property
    def snapshot(self) -> Optional[dict[str, Any]]:
        return self._get("snapshot")


class SnapshotStatusResponse(Response):
    @property
    def snapshots(self) -> list[dict[str, Any]]:
        return self._get("snapshots", [])
