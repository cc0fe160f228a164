"""Shared fixtures: an active in-memory host and a fresh registry."""

from collections.abc import Iterator

import pytest

from cookietree.host import BufferedHost, use_host
from cookietree.registry import Registry, registry_var


@pytest.fixture(autouse=True)
def _fresh_registry() -> Iterator[None]:
    token = registry_var.set(None)
    yield
    registry_var.reset(token)


@pytest.fixture
def host() -> Iterator[BufferedHost]:
    host = BufferedHost(server_name="localhost")
    with use_host(host):
        yield host


@pytest.fixture
def registry(host: BufferedHost) -> Registry:
    return Registry(host.cookies)
