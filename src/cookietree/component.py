"""Component — one addressable region of the cookie dictionary.

A Component stands for one bracketed segment of a cookie name: the
root Component covers the whole incoming dictionary, a child covers
``cookies["pref"]``, a grandchild ``cookies["pref"]["ui"]`` and so on.
Its fully qualified name (``pref[ui]``) is the name handed to the host
when a cookie below it is set.

The dictionary belongs to the host and may change between calls, so a
Component never keeps a reference into it. It keeps the path from the
root dictionary and walks it on every access. The cache only remembers
what was materialized (child Components carry injector bindings) and
is reconciled against the live region whenever a key is touched.

Per key the lifecycle is::

    unmaterialized --touch--> cached scalar | cached subtree --delete--> gone
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Mapping
from typing import Any, TypeAlias

from cookietree.config import DEFAULT_CONFIG, CookieConfig
from cookietree.errors import SetFailed
from cookietree.host import get_host
from cookietree.injector import Injector
from cookietree.node import Node

logger = logging.getLogger("cookietree")

Key: TypeAlias = str | int

# A scalar cookie value, or the subtree for an array-valued cookie
Entry: TypeAlias = "str | Component"


def _is_structure(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _entries(structure: Mapping[Key, Any] | list[Any] | tuple[Any, ...]) -> list[tuple[Key, Any]]:
    if isinstance(structure, Mapping):
        return list(structure.items())
    return list(enumerate(structure))


class Component(Node):
    """Dictionary-like view over one subtree of the cookies.

    Reading::

        registry.get("pref").get("theme")   # cookies["pref"]["theme"]
        "pref" in registry

    Writing goes through the nearest injector::

        registry.set("pref", {"theme": "dark", "lang": "en"})
        # -> cookies pref[theme]=dark and pref[lang]=en

    Deleting a subtree removes every cookie below it.
    """

    __slots__ = ("_cache", "_config", "_key", "_name", "_path", "_store")

    def __init__(
        self,
        store: dict[Any, Any],
        *,
        key: Key = "",
        path: tuple[Key, ...] = (),
        name: str = "",
        parent: Node | None = None,
        config: CookieConfig = DEFAULT_CONFIG,
        weak_parent: bool = True,
    ) -> None:
        super().__init__(parent, weak_parent=weak_parent)
        self._store = store
        self._key = key
        self._path = path
        self._name = name
        self._config = config
        self._cache: dict[Key, Entry] = {}

    def __repr__(self) -> str:
        return f"Component({self._name!r}, entries={self.count()})"

    @property
    def key(self) -> Key:
        return self._key

    @property
    def name(self) -> str:
        """Fully qualified cookie name; empty for the root."""
        return self._name

    @property
    def path(self) -> tuple[Key, ...]:
        return self._path

    def qualified_name(self, key: Key) -> str:
        """Cookie name of *key* below this node: ``name[key]``."""
        if not self._name:
            return str(key)
        return f"{self._name}[{key}]"

    # -- Live region --

    def _region(self) -> dict[Any, Any] | None:
        node: Any = self._store
        for segment in self._path:
            if not isinstance(node, dict):
                return None
            node = node.get(segment)
        return node if isinstance(node, dict) else None

    def _ensure_region(self) -> dict[Any, Any]:
        node = self._store
        for segment in self._path:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = node[segment] = {}
            node = child
        return node

    def _child(self, key: Key) -> Component:
        return Component(
            self._store,
            key=key,
            path=(*self._path, key),
            name=self.qualified_name(key),
            parent=self,
            config=self._config,
        )

    def _materialize(self, key: Key, region: dict[Any, Any]) -> Entry:
        raw = region[key]
        if isinstance(raw, dict):
            entry = self._cache.get(key)
            if not isinstance(entry, Component):
                entry = self._child(key)
        else:
            # A present key with no value reads as an empty cookie
            entry = "" if raw is None else raw
        self._cache[key] = entry
        return entry

    def _lookup(self, key: Key) -> Entry | None:
        region = self._region()
        if region is None or key not in region:
            self._cache.pop(key, None)
            return None
        return self._materialize(key, region)

    # -- Reading --

    def has(self, key: Key) -> bool:
        """Whether *key* exists in the live cookies."""
        return self._lookup(key) is not None

    def get(self, key: Key) -> Entry | None:
        """Child Component for a subtree, the value for a scalar, else None."""
        return self._lookup(key)

    def count(self) -> int:
        """Number of entries in the live region, touched or not."""
        region = self._region()
        return len(region) if region is not None else 0

    def items(self) -> Iterator[tuple[Key, Entry]]:
        """Iterate ``(key, value)`` pairs of the current region.

        Every key of the region is materialized before the first pair is
        produced, so the pairs always reflect the live key set.
        """
        region = self._region() or {}
        for stale in [key for key in self._cache if key not in region]:
            del self._cache[stale]
        pairs = [(key, self._materialize(key, region)) for key in list(region)]
        return iter(pairs)

    def keys(self) -> list[Key]:
        return [key for key, _ in self.items()]

    def values(self) -> list[Entry]:
        return [value for _, value in self.items()]

    def to_array(self) -> dict[Any, Any]:
        """The live region itself.

        Writing to it bypasses injectors and sets no cookie.
        """
        region = self._region()
        return region if region is not None else {}

    # -- Writing --

    def set(self, key: Key, value: Any) -> Component:
        """Set cookie *key* below this node.

        - a mapping, list or tuple becomes a subtree, each entry set in order
        - an ``Injector`` sets its own pending value with its own
          configuration; a structure value also binds it to the new subtree
        - anything else is injected by ``resolve_injector()``

        Nothing is written when a hook stops the injection; ``SetFailed``
        propagates before anything is written.
        """
        if isinstance(value, Injector):
            pending = value.value
            if _is_structure(pending):
                value.clear_value()
                self._set_structure(key, pending, value)
                return self
            content = value.inject(self.qualified_name(key))
        elif _is_structure(value):
            self._set_structure(key, value)
            return self
        else:
            if value is None:
                value = ""
            content = self.resolve_injector().inject(self.qualified_name(key), value)

        if content is None:
            return self

        self._ensure_region()[key] = content
        self._cache[key] = content
        return self

    def _set_structure(
        self,
        key: Key,
        structure: Mapping[Key, Any] | list[Any] | tuple[Any, ...],
        injector: Injector | None = None,
    ) -> None:
        region = self._ensure_region()
        if not isinstance(region.get(key), dict):
            if key in region:
                logger.debug("Scalar cookie %r replaced by a subtree", self.qualified_name(key))
            region[key] = {}

        child = self._child(key)
        self._cache[key] = child
        if injector is not None:
            child.set_injector(injector)

        for child_key, child_value in _entries(structure):
            child.set(child_key, child_value)

    # -- Deleting --

    def delete(self, key: Key) -> Component:
        """Remove *key*; a subtree is removed leaf by leaf. No-op if absent."""
        entry = self._lookup(key)
        if entry is None:
            return self

        if isinstance(entry, Component):
            for child_key in entry.keys():
                entry.delete(child_key)
        else:
            self._remove_cookie(key)

        region = self._region()
        if region is not None:
            region.pop(key, None)
        self._cache.pop(key, None)
        return self

    def _remove_cookie(self, key: Key) -> None:
        name = self.qualified_name(key)
        expires = int(time.time()) - self._config.removal_age
        if not get_host().set_cookie(name, "", expires, "/", "", False, False):
            logger.warning("Cookie %r could not be removed (response already started?)", name)
            raise SetFailed(name, "Cookie removal failed")
        logger.debug("Removed cookie %r", name)

    # -- Python protocols --

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (str, int)) and self.has(key)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys())

    def __call__(self, key: Key, value: Any = None) -> Any:
        """``node(key)`` gets, ``node(key, value)`` sets and returns the node."""
        if value is None:
            return self.get(key)
        return self.set(key, value)
