"""Node — shared base of Component and Registry.

Holds the parent link and the optional injector binding, and resolves
which injector applies to a node: its own, else the nearest ancestor's,
else the default injector of the Registry at the top of the chain.
"""

from __future__ import annotations

import weakref
from typing import Any

from cookietree.injector import Injector


class Node:
    """A node in the cookie tree.

    Nodes hold live references into the host's cookie dictionary, so
    copying one would alias that state; ``copy.copy`` and
    ``copy.deepcopy`` raise ``TypeError``.
    """

    __slots__ = ("__weakref__", "_injector", "_parent")

    def __init__(self, parent: Node | None = None, *, weak_parent: bool = True) -> None:
        # Children link back weakly; a top-level node keeps its owner alive
        self._parent: weakref.ref[Node] | Node | None = (
            weakref.ref(parent) if parent is not None and weak_parent else parent
        )
        self._injector: Injector | None = None

    def __copy__(self) -> Any:
        msg = f"{type(self).__name__} cannot be copied"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        return self.__copy__()

    # -- Parent --

    def get_parent(self) -> Node | None:
        """Return the parent node, or None at the top of the tree."""
        if isinstance(self._parent, weakref.ref):
            return self._parent()
        return self._parent

    @property
    def parent(self) -> Node | None:
        return self.get_parent()

    # -- Injector binding --

    @property
    def injector(self) -> Injector | None:
        """The injector bound to this node itself, if any."""
        return self._injector

    def set_injector(self, injector: Injector) -> Node:
        if not isinstance(injector, Injector):
            msg = f"Expected an Injector, got {type(injector).__name__}"
            raise TypeError(msg)
        self._injector = injector
        return self

    def clear_injector(self) -> Node:
        self._injector = None
        return self

    def default_injector(self) -> Injector:
        """Injector used when nothing on the chain has one bound."""
        return Injector()

    def resolve_injector(self) -> Injector:
        """Nearest-ancestor-wins lookup of the applicable injector."""
        node: Node | None = self
        last: Node = self
        while node is not None:
            if node._injector is not None:
                return node._injector
            last = node
            node = node.get_parent()
        return last.default_injector()
