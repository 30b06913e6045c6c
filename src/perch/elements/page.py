"""Page — the root component a controller action renders into.

Each page owns a fresh ``ComponentTree``. Replacing the shell's page
drops the whole arena at once.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from perch.config import Route
from perch.elements.component import Component
from perch.elements.tree import ComponentTree
from perch.errors import ConstructionError

if TYPE_CHECKING:
    from perch.elements.kinds import KindRegistry


class Page(Component):
    """A root component bound to a ``controller/action`` route.

    ``title`` defaults to the ``title`` argument; ``build()`` may set it.
    """

    is_page = True

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.route: Route | None = None
        self.title: str = str(self.args.get("title") or "")

    def model(self) -> dict[str, Any]:
        ctx = super().model()
        ctx["title"] = self.title
        ctx["route"] = self.route
        return ctx


def build_page(
    kinds: KindRegistry,
    kind: type | str,
    route: Route,
    args: Mapping[str, Any] | None = None,
    *,
    page_id: str | None = None,
) -> Page:
    """Build a new page tree bound to *route*.

    Raises:
        ConstructionError: *kind* is not a ``Page`` kind, or building
            any component of the tree failed.
    """
    kind_def = kinds.resolve(kind)
    if not issubclass(kind_def.cls, Page):
        msg = f"{kind_def.name!r} is not a page kind"
        raise ConstructionError(msg)
    tree = ComponentTree(kinds)
    page = tree.create(kind_def.name, component_id=page_id, args=args, route=route)
    assert isinstance(page, Page)
    return page
