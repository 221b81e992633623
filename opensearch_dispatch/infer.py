"""Index name inference.

A request can name its index explicitly, point at a document type whose
index is configured on the connection, or say nothing at all. The
:class:`IndexNameResolver` turns any of those into the concrete name that
goes on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .connection_settings import ConnectionConfig, type_key
from .exceptions import ConfigurationError

DocumentType = Union[type, str]


@dataclass(frozen=True)
class IndexName:
    """How a caller referred to an index: by name or by document type."""

    name: Optional[str] = None
    type: Optional[DocumentType] = None

    def __post_init__(self) -> None:
        if self.name is not None and self.type is not None:
            raise ValueError("IndexName takes either a name or a type, not both")

    @classmethod
    def from_name(cls, name: str) -> "IndexName":
        return cls(name=name)

    @classmethod
    def from_type(cls, document_type: DocumentType) -> "IndexName":
        return cls(type=document_type)

    @classmethod
    def of(cls, value: Union["IndexName", str, type, None]) -> Optional["IndexName"]:
        """Coerce a name, a class or an ``IndexName`` into an ``IndexName``."""
        if value is None or isinstance(value, IndexName):
            return value
        if isinstance(value, str):
            return cls.from_name(value)
        if isinstance(value, type):
            return cls.from_type(value)
        raise TypeError(f"Cannot build an IndexName from {value!r}")

    def __str__(self) -> str:
        if self.name is not None:
            return self.name
        if self.type is not None:
            return f"<{type_key(self.type)}>"
        return ""


class IndexNameResolver:
    """Resolve index references against a connection's configuration."""

    def __init__(self, config: ConnectionConfig) -> None:
        if config is None:
            raise ConfigurationError("IndexNameResolver requires a ConnectionConfig")
        self._config = config

    def resolve(self, index: Union[IndexName, str, type, None]) -> Optional[str]:
        """Return the concrete index name for *index*.

        An explicit name always wins; a type goes through
        :meth:`resolve_type`; nothing at all yields the default index.
        """
        reference = IndexName.of(index)
        if reference is None:
            return self.resolve_type(None)
        if reference.name is not None:
            return reference.name
        return self.resolve_type(reference.type)

    def resolve_type(self, document_type: Optional[DocumentType]) -> Optional[str]:
        default_indices = self._config.default_indices

        if default_indices is None:
            return self._config.default_index

        if document_type is None:
            return self._config.default_index

        # A blank override means "no override", not "target a blank name".
        value = default_indices.get(type_key(document_type))
        if value is not None and value.strip():
            return value
        return self._config.default_index
