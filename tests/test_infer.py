from __future__ import annotations

import pytest

from opensearch_dispatch import ConfigurationError, ConnectionConfig, IndexName, IndexNameResolver


class TypeA:
    pass


class TypeB:
    pass


def test_concrete_scenario(config: ConnectionConfig) -> None:
    resolver = IndexNameResolver(config)

    assert resolver.resolve(TypeA) == "alpha"
    assert resolver.resolve(TypeB) == "main"
    assert resolver.resolve("explicit") == "explicit"
    assert resolver.resolve(None) == "main"


def test_absent_mapping_falls_back_to_default() -> None:
    resolver = IndexNameResolver(ConnectionConfig(default_index="main", default_indices=None))

    assert resolver.resolve(TypeA) == "main"
    assert resolver.resolve_type(TypeA) == "main"
    assert resolver.resolve_type("anything") == "main"


def test_empty_mapping_falls_back_to_default() -> None:
    resolver = IndexNameResolver(ConnectionConfig(default_index="main", default_indices={}))

    assert resolver.resolve(TypeA) == "main"
    assert resolver.resolve_type(TypeB) == "main"


@pytest.mark.parametrize("blank", ["", " ", "\t\n"])
def test_blank_override_is_ignored(blank: str) -> None:
    cfg = ConnectionConfig(default_index="main", default_indices={"TypeA": blank})
    assert IndexNameResolver(cfg).resolve(TypeA) == "main"


def test_explicit_name_wins_over_type_config(config: ConnectionConfig) -> None:
    resolver = IndexNameResolver(config)

    assert resolver.resolve(IndexName.from_name("TypeA")) == "TypeA"
    assert resolver.resolve(IndexName.from_name("logs-2024")) == "logs-2024"


def test_null_type_resolves_to_default(config: ConnectionConfig) -> None:
    resolver = IndexNameResolver(config)

    assert resolver.resolve_type(None) == "main"
    assert resolver.resolve(IndexName()) == "main"


def test_type_marker_by_registered_name(config: ConnectionConfig) -> None:
    resolver = IndexNameResolver(config)

    assert resolver.resolve(IndexName.from_type("TypeA")) == "alpha"
    assert resolver.resolve(IndexName.from_type(TypeA)) == "alpha"


def test_resolve_is_idempotent(config: ConnectionConfig) -> None:
    resolver = IndexNameResolver(config)
    reference = IndexName.from_type(TypeA)

    results = {resolver.resolve(reference) for _ in range(10)}

    assert results == {"alpha"}
    assert config.default_indices == {"TypeA": "alpha"}


def test_missing_default_index_resolves_to_none() -> None:
    resolver = IndexNameResolver(ConnectionConfig())
    assert resolver.resolve(None) is None


def test_resolver_requires_config() -> None:
    with pytest.raises(ConfigurationError):
        IndexNameResolver(None)


def test_index_name_coercion() -> None:
    assert IndexName.of(None) is None
    assert IndexName.of("idx") == IndexName(name="idx")
    assert IndexName.of(TypeA) == IndexName(type=TypeA)

    existing = IndexName.from_name("idx")
    assert IndexName.of(existing) is existing

    assert str(IndexName.from_type(TypeA)) == "<TypeA>"

    with pytest.raises(TypeError):
        IndexName.of(3.14)


def test_index_name_is_one_variant_only() -> None:
    with pytest.raises(ValueError):
        IndexName(name="idx", type=TypeA)
