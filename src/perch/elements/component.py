"""Component — base node of the server-rendered UI tree.

Components are created only through the factory (``create_component``,
``create_control``, ``build_page``); the factory validates arguments,
assigns the id and view path, registers the node in its arena, and then
calls ``build()``. Subclasses compose their children in ``build()``::

    class CustomPage(Page):
        def build(self) -> None:
            self.view_path = "custom/"
            self.header = self.create_component(Header)
            self.content = self.create_component(ContentBlank, "content")

Construction and render are separate phases: nothing is rendered here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from perch.elements.kinds import resolve_view_path
from perch.errors import ArgsException, ConfigurationError, ConstructionError

if TYPE_CHECKING:
    from perch.elements.kinds import KindDef
    from perch.elements.tree import ComponentTree


class Component:
    """A node with identity, a view path, frozen arguments and ordered children.

    Attributes:
        id: Unique among the component's siblings.
        kind: The registered kind name.
        view_path: Template name, or a directory ending in ``/``.
        args: Read-only construction arguments (unknown keys included).
        options: Typed options object, if the kind declares one.
    """

    slots: ClassVar[tuple[str, ...]] = ()
    leaf: ClassVar[bool] = False
    is_page: ClassVar[bool] = False

    def __init__(
        self,
        *,
        tree: ComponentTree,
        key: int,
        kind: KindDef,
        id: str,  # noqa: A002
        args: Mapping[str, Any],
        options: Any = None,
    ) -> None:
        self._tree = tree
        self.key = key
        self.kind = kind.name
        self.id = id
        self.view_path: str | None = kind.view_path
        self.args = args
        self.options = options

    def build(self) -> None:
        """Compose child components. Called once by the factory."""

    # -- Tree --

    @property
    def tree(self) -> ComponentTree:
        return self._tree

    @property
    def owner(self) -> Component | None:
        """The parent component, or ``None`` for a root."""
        return self._tree.parent_of(self.key)

    @property
    def children(self) -> tuple[Component, ...]:
        """Children in render order."""
        return self._tree.children_of(self.key)

    @property
    def path(self) -> str:
        """Dotted ids from the root, e.g. ``customPage.header``."""
        owner = self.owner
        if owner is None:
            return self.id
        return f"{owner.path}.{self.id}"

    def get(self, component_id: str) -> Component | None:
        return self._tree.child(self.key, component_id)

    def __getitem__(self, component_id: str) -> Component:
        child = self.get(component_id)
        if child is None:
            msg = f"{self.path!r} has no child {component_id!r}"
            raise KeyError(msg)
        return child

    def __contains__(self, component_id: str) -> bool:
        return self.get(component_id) is not None

    # -- Factory --

    def create_component(
        self,
        kind: type | str,
        id: str | None = None,  # noqa: A002
        args: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Component:
        """Create a child of *kind* and register it at the next position.

        Arguments come from *args* and keyword arguments (keywords win).
        Without an explicit *id* the child gets the kind name with a
        lower-case first letter, numbered when already taken.

        Raises:
            ArgsException: A required argument is missing.
            DuplicateComponentError: *id* is already used by a sibling.
        """
        if self.leaf:
            msg = f"{self.kind!r} is a control and cannot own components"
            raise ConstructionError(msg)
        bag = {**(args or {}), **kwargs}
        return self._tree.create(kind, parent=self, component_id=id, args=bag)

    def create_control(self, attrs: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Control:
        """Create an interactive leaf from an attribute mapping.

        ``class`` (or ``kind``) names the control kind and ``id`` is
        optional; everything else (icon, text, animate, controller, …) is
        stored as arguments for the template::

            self.home = self.create_control(
                {"class": Button, "id": "home", "controller": "shell", "icon": "fa-home"}
            )
        """
        bag = {**(attrs or {}), **kwargs}
        kind = bag.pop("class", None) or bag.pop("kind", None)
        if kind is None:
            raise ArgsException("class", f"{self.path}:control")
        control_id = bag.pop("id", None)

        kind_def = self._tree.kinds.resolve(kind)
        if not issubclass(kind_def.cls, Control):
            msg = f"{kind_def.name!r} is not a control kind"
            raise ConstructionError(msg)
        control = self.create_component(kind_def.name, control_id, bag)
        assert isinstance(control, Control)
        return control

    def remove_component(self, component_id: str) -> None:
        """Discard a child together with its subtree."""
        child = self[component_id]
        self._tree.discard(child.key)

    # -- Render support --

    @property
    def template(self) -> str:
        """The resolved template name.

        Raises ``ConfigurationError`` when the view path was cleared.
        """
        if not self.view_path:
            msg = f"Component {self.path!r} has no view path"
            raise ConfigurationError(msg)
        return resolve_view_path(self.view_path, self.kind, self._tree.kinds.view_suffix)

    def model(self) -> dict[str, Any]:
        """Template variables for this component (children are added by the renderer)."""
        return {**self.args, "id": self.id, "path": self.path, "options": self.options}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.path!r} view={self.view_path!r}>"


class Control(Component):
    """An interactive leaf (button, link, …). Cannot own components."""

    leaf = True
