"""Registry — the root of the cookie tree for the active host.

All work should go through ``Registry.instance()`` or its shortcut
``cookie()``. The registry binds the incoming cookies of the active
host on first access and is reused for as long as that host stays
active. Every host gets its own registry, so one request never sees
another request's cookies.

Getting::

    cookie().get("pref").get("theme")   # cookies["pref"]["theme"]

Setting (adds to the cookies and calls the host primitive)::

    cookie().set("lang", "en")
    cookie().set("pref", {"theme": "dark", "lang": "en"})

Checking, counting, iterating::

    if "pref" in cookie():
        for key, value in cookie().items():
            ...

Deleting (removes locally and asks the client to drop the cookie)::

    cookie().delete("pref")

Parents: a top-level Component reports the Registry as its parent; the
Registry itself has none.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextvars import ContextVar
from typing import Any

from cookietree.component import Component, Entry, Key
from cookietree.config import DEFAULT_CONFIG, CookieConfig
from cookietree.host import CookieHost, get_host
from cookietree.injector import Injector
from cookietree.node import Node


class Registry(Node):
    """Root node bound to the full incoming cookie dictionary.

    Constructing one directly is meant for tests and embedding; normal
    code uses ``Registry.instance()``. The top-level Component holds its
    Registry strongly, so ``Registry(cookies).root`` keeps the registry's
    configuration and injectors alive.
    """

    __slots__ = ("_config", "_default", "_host", "_root")

    def __init__(
        self,
        cookies: dict[Any, Any],
        *,
        config: CookieConfig = DEFAULT_CONFIG,
        host: CookieHost | None = None,
    ) -> None:
        super().__init__(None)
        self._config = config
        self._host = host
        self._default = Injector(defaults=config)
        self._root = Component(cookies, parent=self, config=config, weak_parent=False)

    @classmethod
    def instance(cls) -> Registry:
        """Return the registry of the active host, binding it on first use."""
        host = get_host()
        registry = registry_var.get()
        if registry is None or registry._host is not host:
            registry = cls(host.cookies, host=host)
            registry_var.set(registry)
        return registry

    def __repr__(self) -> str:
        return f"Registry(entries={self.count()})"

    @property
    def host(self) -> CookieHost | None:
        """The host this registry was bound to by ``instance()``."""
        return self._host

    @property
    def root(self) -> Component:
        return self._root

    @property
    def config(self) -> CookieConfig:
        return self._config

    def default_injector(self) -> Injector:
        """The injector shared by every node without a closer binding.

        Treat it as read-only; bind a new injector with
        ``set_injector()`` to change tree-wide behaviour.
        """
        return self._default

    # -- Delegation to the root component --

    def has(self, key: Key) -> bool:
        return self._root.has(key)

    def get(self, key: Key) -> Entry | None:
        return self._root.get(key)

    def set(self, key: Key, value: Any) -> Registry:
        self._root.set(key, value)
        return self

    def delete(self, key: Key) -> Registry:
        self._root.delete(key)
        return self

    def count(self) -> int:
        return self._root.count()

    def items(self) -> Iterator[tuple[Key, Entry]]:
        return self._root.items()

    def keys(self) -> list[Key]:
        return self._root.keys()

    def values(self) -> list[Entry]:
        return self._root.values()

    def to_array(self) -> dict[Any, Any]:
        return self._root.to_array()

    def __contains__(self, key: object) -> bool:
        return key in self._root

    def __len__(self) -> int:
        return self._root.count()

    def __iter__(self) -> Iterator[Key]:
        return iter(self._root)

    def __call__(self, key: Key, value: Any = None) -> Any:
        if value is None:
            return self._root.get(key)
        self._root.set(key, value)
        return self


registry_var: ContextVar[Registry | None] = ContextVar("cookietree_registry", default=None)
"""The registry of the active host. Set by ``Registry.instance()``."""


def cookie() -> Registry:
    """Shortcut for ``Registry.instance()``."""
    return Registry.instance()
