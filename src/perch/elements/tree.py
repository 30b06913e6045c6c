"""Component arena — one page's components, indexed by key.

Components never hold references to their parent or children. The tree
keeps three tables keyed by an integer node key:

- ``_nodes``: key → Component
- ``_parents``: key → parent key (``None`` for the root)
- ``_children``: key → ordered ``{child id: child key}``

Parent lookup is a dict read, child order is dict insertion order, and
there are no reference cycles to break when a page is discarded.

Named slots: a component class may declare ``slots = ("header", ...)``.
Those ids are reserved in declaration order when the component is
created and filled when a child with that id arrives, so slot order wins
over creation order for them. Every other child is appended.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from perch.elements.args import validate_arguments
from perch.errors import ConstructionError, DuplicateComponentError

if TYPE_CHECKING:
    from perch.config import Route
    from perch.elements.component import Component
    from perch.elements.kinds import KindDef, KindRegistry


def default_id(kind_name: str) -> str:
    """Deterministic default id for a kind: ``ContentBlank`` → ``contentBlank``."""
    return kind_name[:1].lower() + kind_name[1:]


class ComponentTree:
    """Arena of components for a single page (or a single navbar)."""

    __slots__ = ("_children", "_next_key", "_nodes", "_parents", "kinds")

    def __init__(self, kinds: KindRegistry) -> None:
        self.kinds = kinds
        self._nodes: dict[int, Component] = {}
        self._parents: dict[int, int | None] = {}
        self._children: dict[int, dict[str, int | None]] = {}
        self._next_key = 0

    # -- Construction --

    def create(
        self,
        kind: type | str,
        *,
        parent: Component | None = None,
        component_id: str | None = None,
        args: Mapping[str, Any] | None = None,
        route: Route | None = None,
    ) -> Component:
        """Create a component and run its ``build()`` hook.

        The argument bag is validated before anything is allocated. If
        ``build()`` raises, the new component and everything it created
        are removed again before the error propagates.

        Raises:
            ArgsException: A required argument is missing.
            DuplicateComponentError: An explicit id is already taken.
            ConstructionError: Unknown kind, or a second root.
        """
        kind_def = self.kinds.resolve(kind)
        bag, options = validate_arguments(kind_def, args or {})

        if parent is None:
            if self._nodes:
                msg = f"Tree already has a root; cannot add {kind_def.name!r} without a parent"
                raise ConstructionError(msg)
            parent_key = None
            cid = component_id or default_id(kind_def.name)
        else:
            if getattr(kind_def.cls, "is_page", False):
                msg = f"{kind_def.name!r} is a page kind and cannot have an owner"
                raise ConstructionError(msg)
            if parent.key not in self._nodes or self._nodes[parent.key] is not parent:
                msg = f"Component {parent.id!r} does not belong to this tree"
                raise ConstructionError(msg)
            parent_key = parent.key
            cid = self._assign_id(kind_def, self._children[parent_key], component_id, parent.path)

        key = self._next_key
        self._next_key += 1

        component = kind_def.cls(
            tree=self,
            key=key,
            kind=kind_def,
            id=cid,
            args=bag,
            options=options,
        )
        if route is not None:
            component.route = route

        self._nodes[key] = component
        self._parents[key] = parent_key
        self._children[key] = dict.fromkeys(component.slots)
        if parent_key is not None:
            self._children[parent_key][cid] = key

        try:
            component.build()
        except Exception:
            self.discard(key)
            raise
        return component

    def _assign_id(
        self,
        kind: KindDef,
        siblings: dict[str, int | None],
        explicit: str | None,
        parent_path: str,
    ) -> str:
        if explicit is not None:
            if not explicit:
                msg = f"Empty id for {kind.name!r} under {parent_path!r}"
                raise ConstructionError(msg)
            if siblings.get(explicit) is not None:
                raise DuplicateComponentError(explicit, parent_path)
            return explicit

        base = default_id(kind.name)
        candidate, n = base, 1
        while siblings.get(candidate) is not None:
            n += 1
            candidate = f"{base}{n}"
        return candidate

    def discard(self, key: int) -> None:
        """Remove a component and its whole subtree."""
        if key not in self._nodes:
            return
        for child_key in list(self._children[key].values()):
            if child_key is not None:
                self.discard(child_key)

        component = self._nodes.pop(key)
        parent_key = self._parents.pop(key)
        del self._children[key]

        if parent_key is not None and parent_key in self._nodes:
            siblings = self._children[parent_key]
            if component.id in self._nodes[parent_key].slots:
                siblings[component.id] = None
            else:
                siblings.pop(component.id, None)

    # -- Lookup --

    def get(self, key: int) -> Component | None:
        return self._nodes.get(key)

    def parent_of(self, key: int) -> Component | None:
        parent_key = self._parents.get(key)
        if parent_key is None:
            return None
        return self._nodes[parent_key]

    def children_of(self, key: int) -> tuple[Component, ...]:
        """Children in render order. Empty reserved slots are skipped."""
        return tuple(self._nodes[k] for k in self._children.get(key, {}).values() if k is not None)

    def child(self, key: int, component_id: str) -> Component | None:
        child_key = self._children.get(key, {}).get(component_id)
        if child_key is None:
            return None
        return self._nodes[child_key]

    @property
    def root(self) -> Component | None:
        for key, parent_key in self._parents.items():
            if parent_key is None:
                return self._nodes[key]
        return None

    def walk(self, key: int) -> Iterator[Component]:
        """Post-order walk: every child subtree before its parent."""
        for child in self.children_of(key):
            yield from self.walk(child.key)
        yield self._nodes[key]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, component: object) -> bool:
        key = getattr(component, "key", None)
        return key is not None and self._nodes.get(key) is component
