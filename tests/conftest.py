from __future__ import annotations

import os

import pytest

from opensearch_dispatch import ConnectionConfig


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: tests that require a running OpenSearch cluster",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.getenv("OPENSEARCH_RUN_INTEGRATION") == "1":
        return

    skip_integration = pytest.mark.skip(
        reason="Set OPENSEARCH_RUN_INTEGRATION=1 to run integration tests"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


class DummyNamespace:
    def __init__(self, owner, prefix):
        self._owner = owner
        self._prefix = prefix

    def __getattr__(self, name):
        return self._owner._method(self._prefix + name)


class DummyTransport:
    """Records every endpoint call; answers from ``responses`` by API name."""

    def __init__(self, responses=None):
        self.calls = []
        self.closed = False
        self.responses = dict(responses or {})
        self.indices = DummyNamespace(self, "indices.")
        self.snapshot = DummyNamespace(self, "snapshot.")

    def _answer(self, api, kwargs):
        self.calls.append((api, kwargs))
        result = self.responses.get(api, {"acknowledged": True})
        if isinstance(result, Exception):
            raise result
        return result

    def _method(self, api):
        def method(**kwargs):
            return self._answer(api, kwargs)

        return method

    def __getattr__(self, name):
        return self._method(name)

    def close(self):
        self.closed = True


class AsyncDummyTransport(DummyTransport):
    def _method(self, api):
        async def method(**kwargs):
            return self._answer(api, kwargs)

        return method

    async def close(self):
        self.closed = True


@pytest.fixture
def config() -> ConnectionConfig:
    cfg = ConnectionConfig(default_index="main")
    cfg.map_default_index("TypeA", "alpha")
    return cfg


@pytest.fixture
def transport() -> DummyTransport:
    return DummyTransport()


@pytest.fixture
def async_transport() -> AsyncDummyTransport:
    return AsyncDummyTransport()
