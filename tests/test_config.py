from __future__ import annotations

import pytest

from opensearch_dispatch import ConfigurationError, ConnectionConfig, load_config, type_key


def test_load_config_env_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENSEARCH_HOST", "example.com")
    monkeypatch.setenv("OPENSEARCH_PORT", "443")
    monkeypatch.setenv("OPENSEARCH_USER", "u")
    monkeypatch.setenv("OPENSEARCH_PASSWORD", "p")
    monkeypatch.setenv("OPENSEARCH_USE_SSL", "yes")
    monkeypatch.setenv("OPENSEARCH_VERIFY_CERTS", "no")
    monkeypatch.setenv("OPENSEARCH_RETRY_ON_TIMEOUT", "on")
    monkeypatch.setenv("OPENSEARCH_HTTP_COMPRESS", "off")
    monkeypatch.setenv("OPENSEARCH_TIMEOUT", "99")
    monkeypatch.setenv("OPENSEARCH_MAX_RETRIES", "5")
    monkeypatch.setenv("OPENSEARCH_BULK_CHUNK", "1000")

    cfg = load_config()

    assert cfg.host == "example.com"
    assert cfg.port == 443
    assert cfg.http_auth == ("u", "p")
    assert cfg.use_ssl is True
    assert cfg.verify_certs is False
    assert cfg.retry_on_timeout is True
    assert cfg.http_compress is False
    assert cfg.timeout == 99
    assert cfg.max_retries == 5
    assert cfg.bulk_chunk == 1000


def test_default_index_env_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENSEARCH_DEFAULT_INDEX", "main")
    monkeypatch.setenv("OPENSEARCH_DEFAULT_INDICES", "TypeA=alpha, TypeB = beta,")

    cfg = load_config()

    assert cfg.default_index == "main"
    assert cfg.default_indices == {"TypeA": "alpha", "TypeB": "beta"}


def test_default_indices_absent_unless_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENSEARCH_DEFAULT_INDICES", raising=False)
    assert load_config().default_indices is None

    monkeypatch.setenv("OPENSEARCH_DEFAULT_INDICES", "")
    assert load_config().default_indices == {}


def test_malformed_default_indices_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENSEARCH_DEFAULT_INDICES", "TypeA")
    with pytest.raises(ConfigurationError):
        load_config()


def test_invalid_bool_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENSEARCH_USE_SSL", "maybe")
    with pytest.raises(ValueError):
        load_config()


def test_unknown_override_key_raises() -> None:
    with pytest.raises(TypeError):
        load_config(not_a_real_key=True)


def test_hosts_property_uses_scheme() -> None:
    cfg = ConnectionConfig(host="localhost", port=9200, use_ssl=False)
    assert cfg.hosts == [{"host": "localhost", "port": 9200, "scheme": "http"}]


def test_map_default_index_keys_classes_by_name() -> None:
    class Invoice:
        pass

    cfg = ConnectionConfig(default_index="main")
    assert cfg.default_indices is None

    cfg.map_default_index(Invoice, "invoices").map_default_index("Order", "orders")

    assert cfg.default_indices == {"Invoice": "invoices", "Order": "orders"}
    assert type_key(Invoice) == "Invoice"
    assert type_key("Order") == "Order"


def test_type_key_rejects_instances() -> None:
    with pytest.raises(TypeError):
        type_key(42)


def test_transport_kwargs_omit_unset_credentials() -> None:
    cfg = ConnectionConfig(user="", password="", ca_certs=None)
    kwargs = cfg.transport_kwargs()

    assert "http_auth" not in kwargs
    assert "ca_certs" not in kwargs
    assert kwargs["timeout"] == 30
