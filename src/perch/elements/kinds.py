"""Kind registry — the kind → view path / argument contract table.

``KindDef`` is the frozen definition of one component kind;
``KindRegistry`` is the lookup table the element factory resolves kinds
through. The table is filled at startup (``App.component()`` and the
built-in elements) and frozen with the app, so no view path is ever
discovered from class names at request time.

Free-threading safety:
    - KindDef is a frozen dataclass (immutable)
    - KindRegistry is only written before ``freeze()``; afterwards every
      method is a read
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from perch.elements.args import required_fields
from perch.errors import ConfigurationError, ConstructionError

if TYPE_CHECKING:
    from perch.elements.component import Component


@dataclass(frozen=True, slots=True)
class KindDef:
    """A registered component kind.

    Attributes:
        name: Kind name, also the default template base name.
        cls: The Component subclass instantiated for this kind.
        view_path: Default template name for instances of the kind.
        required: Mandatory construction arguments, in check order.
        options: Optional frozen dataclass built from the argument bag.
        builtin: Shipped by perch; an application kind of the same name
            replaces it.
    """

    name: str
    cls: type[Component]
    view_path: str
    required: tuple[str, ...] = ()
    options: type | None = None
    builtin: bool = False


def resolve_view_path(view_path: str, kind_name: str, suffix: str = ".html") -> str:
    """Turn a component's ``view_path`` into a template name.

    A path ending in ``/`` names a directory; the kind name and suffix are
    appended::

        resolve_view_path("/custom/", "CustomPage")  # "custom/CustomPage.html"
        resolve_view_path("custom/page.html", "CustomPage")  # unchanged
    """
    path = view_path.lstrip("/")
    if not path or path.endswith("/"):
        return f"{path}{kind_name}{suffix}"
    return path


class KindRegistry:
    """Kind table. Mutable during setup, read-only once frozen."""

    __slots__ = ("_by_class", "_by_name", "_frozen", "view_dir", "view_suffix")

    def __init__(self, *, view_dir: str = "elements/", view_suffix: str = ".html") -> None:
        self._by_name: dict[str, KindDef] = {}
        self._by_class: dict[type, KindDef] = {}
        self._frozen = False
        self.view_dir = view_dir
        self.view_suffix = view_suffix

    def register(
        self,
        cls: type[Component],
        *,
        name: str | None = None,
        view_path: str | None = None,
        required: tuple[str, ...] = (),
        options: type | None = None,
        builtin: bool = False,
    ) -> KindDef:
        """Add a kind to the table.

        ``view_path`` defaults to ``<view_dir><name><view_suffix>``. The
        required set is ``required`` followed by the options dataclass's
        fields without defaults.

        Raises:
            ConfigurationError: The registry is frozen, or the name is
                already taken by a non-builtin kind.
        """
        if self._frozen:
            msg = f"Cannot register kind {cls.__name__!r}: the kind registry is frozen."
            raise ConfigurationError(msg)

        kind_name = name or cls.__name__
        existing = self._by_name.get(kind_name)
        if existing is not None:
            if builtin:
                return existing
            if not existing.builtin:
                msg = f"Duplicate component kind: {kind_name!r}"
                raise ConfigurationError(msg)
            del self._by_class[existing.cls]

        mandatory = list(required)
        if options is not None:
            mandatory.extend(f for f in required_fields(options) if f not in mandatory)

        kind = KindDef(
            name=kind_name,
            cls=cls,
            view_path=resolve_view_path(view_path or self.view_dir, kind_name, self.view_suffix),
            required=tuple(mandatory),
            options=options,
            builtin=builtin,
        )
        self._by_name[kind_name] = kind
        self._by_class[cls] = kind
        return kind

    def resolve(self, kind: type | str) -> KindDef:
        """Look up a kind by class or by name.

        Raises ``ConstructionError`` if the kind was never registered.
        """
        found = self._by_name.get(kind) if isinstance(kind, str) else self._by_class.get(kind)
        if found is None:
            label = kind if isinstance(kind, str) else kind.__name__
            msg = f"Component kind {label!r} is not registered"
            raise ConstructionError(msg)
        return found

    def get(self, name: str) -> KindDef | None:
        """Look up a kind by name. Returns ``None`` if not found."""
        return self._by_name.get(name)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __iter__(self) -> Iterator[KindDef]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name
