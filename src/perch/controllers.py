"""Controllers — the handlers UI events are routed to.

A controller declares which events it handles and which actions (pages)
it can display. Both tables are built when the class is defined, from
explicit decorators, never by looking up method names at dispatch time::

    class KeyPressController(ElementsController):
        security: SecurityService

        @on("keyPress")
        async def on_key_press(self) -> None:
            user = await invoke(self.security.get_user_by_external_id, self.event.keyPressed)
            if user:
                self.display("authentication", "logout")

        @action
        def index(self) -> Page:
            return self.create_page(KeyPressPage)

``ControllerDef`` is the frozen, compiled definition (like a route);
``ControllerRegistry`` is the lookup table the dispatcher resolves
controllers through (like a router). Both are built at ``App._freeze()``.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from perch._internal.types import Handler, Provider
from perch.elements.builtin import ShellHome
from perch.elements.page import Page, build_page
from perch.errors import ConfigurationError

if TYPE_CHECKING:
    from perch.config import Route
    from perch.context import EventContext
    from perch.elements.kinds import KindRegistry
    from perch.shell import Shell

F = TypeVar("F", bound=Callable[..., Any])


# -- Decorators --


def on(*events: str) -> Callable[[F], F]:
    """Register a controller method as the handler of one or more events."""
    if not events:
        msg = "on() needs at least one event name"
        raise ConfigurationError(msg)

    def decorator(func: F) -> F:
        existing: tuple[str, ...] = getattr(func, "_perch_events", ())
        func._perch_events = existing + events  # type: ignore[attr-defined]
        return func

    return decorator


def action(name: str | Callable[..., Any] | None = None) -> Any:
    """Register a controller method as a page action.

    Usable bare (``@action``, named after the method) or with a name
    (``@action("logout")``).
    """
    if callable(name):
        name._perch_action = name.__name__  # type: ignore[union-attr]
        return name

    def decorator(func: F) -> F:
        func._perch_action = name or func.__name__  # type: ignore[attr-defined]
        return func

    return decorator


def controller_name(class_name: str) -> str:
    """``KeyPressController`` → ``keyPress``."""
    base = class_name.removesuffix("Controller") or class_name
    return base[:1].lower() + base[1:]


# -- Base class --


class ElementsController:
    """Base class for controllers.

    A new instance is created for every event and every action. The
    dispatcher sets ``shell``, ``event`` and ``route`` and injects the
    declared collaborators before calling into it.
    """

    name: ClassVar[str] = ""
    events: ClassVar[Mapping[str, Handler]] = MappingProxyType({})
    actions: ClassVar[Mapping[str, Handler]] = MappingProxyType({})

    def __init_subclass__(cls, *, name: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.name = name or controller_name(cls.__name__)
        cls.events = MappingProxyType(_collect(cls, "_perch_events"))
        cls.actions = MappingProxyType(_collect(cls, "_perch_action"))

    def __init__(
        self,
        *,
        shell: Shell,
        kinds: KindRegistry,
        route: Route,
        event: EventContext | None = None,
    ) -> None:
        self.shell = shell
        self.route = route
        self.event = event
        self._kinds = kinds

    def display(self, controller: str | None = None, action: str | None = None, **params: Any) -> None:
        """Re-render (no arguments) or redirect to ``controller/action``."""
        self.shell.director.display(controller, action, **params)

    def create_page(self, kind: type | str, id: str | None = None, **args: Any) -> Page:  # noqa: A002
        """Build a page bound to the route this controller is serving."""
        return build_page(self._kinds, kind, self.route, args, page_id=id)

    @classmethod
    def handler_for(cls, event: str) -> Handler | None:
        return cls.events.get(event)

    @classmethod
    def action_for(cls, name: str) -> Handler | None:
        return cls.actions.get(name)


_BASE_ATTRIBUTES = frozenset({"name", "events", "actions", "shell", "route", "event"})


def _collect(cls: type, marker: str) -> dict[str, Handler]:
    """Build a name → function table from decorated methods along the MRO.

    Subclasses override their bases. Two methods of the same class
    claiming one name is a ``ConfigurationError``.
    """
    table: dict[str, Handler] = {}
    for klass in reversed(cls.__mro__):
        local: dict[str, str] = {}
        for attr, value in vars(klass).items():
            names = getattr(value, marker, None)
            if names is None:
                continue
            for entry in (names,) if isinstance(names, str) else names:
                if entry in local:
                    msg = (
                        f"{klass.__name__} declares {entry!r} twice "
                        f"({local[entry]} and {attr})"
                    )
                    raise ConfigurationError(msg)
                local[entry] = attr
                table[entry] = value
    return table


def _collaborators(
    cls: type[ElementsController],
    providers: Mapping[type, Provider],
) -> tuple[tuple[str, type], ...]:
    """Annotated attributes of *cls* to inject from *providers*.

    An attribute annotated with a class and given no class-level value is
    a collaborator and needs a provider. ``ClassVar`` and other non-class
    annotations are ignored.

    Raises:
        ConfigurationError: A collaborator has no registered provider.
    """
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable forward references: keep the annotations that are real types
        hints = {}
        for klass in reversed(cls.__mro__):
            hints.update(inspect.get_annotations(klass))

    collaborators: list[tuple[str, type]] = []
    for attr, hint in hints.items():
        if attr in _BASE_ATTRIBUTES or not isinstance(hint, type):
            continue
        if hint in providers:
            collaborators.append((attr, hint))
        elif not hasattr(cls, attr):
            msg = (
                f"Controller {cls.name!r} declares collaborator "
                f"{attr}: {hint.__name__} but no provider is registered. "
                f"Call app.provide({hint.__name__}, factory) or give it a default."
            )
            raise ConfigurationError(msg)
    return tuple(collaborators)


# -- Compiled registry --


@dataclass(frozen=True, slots=True)
class ControllerDef:
    """A compiled controller: its class plus the collaborators to inject."""

    name: str
    cls: type[ElementsController]
    collaborators: tuple[tuple[str, type], ...] = ()

    @property
    def events(self) -> Mapping[str, Handler]:
        return self.cls.events

    @property
    def actions(self) -> Mapping[str, Handler]:
        return self.cls.actions


class ControllerRegistry:
    """Compiled controller table. Created at freeze time, immutable at runtime."""

    __slots__ = ("_controllers", "_providers")

    def __init__(
        self,
        controllers: list[ControllerDef],
        providers: Mapping[type, Provider],
    ) -> None:
        self._controllers: dict[str, ControllerDef] = {c.name: c for c in controllers}
        self._providers = MappingProxyType(dict(providers))

    def get(self, name: str) -> ControllerDef | None:
        """Look up a controller by name. Returns ``None`` if not found."""
        return self._controllers.get(name)

    def instantiate(
        self,
        definition: ControllerDef,
        *,
        shell: Shell,
        kinds: KindRegistry,
        route: Route,
        event: EventContext | None = None,
    ) -> ElementsController:
        """Create a controller instance and inject its collaborators."""
        controller = definition.cls(shell=shell, kinds=kinds, route=route, event=event)
        for attr, annotation in definition.collaborators:
            setattr(controller, attr, self._providers[annotation]())
        return controller

    def __iter__(self) -> Iterator[ControllerDef]:
        return iter(self._controllers.values())

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, name: str) -> bool:
        return name in self._controllers


class ShellController(ElementsController):
    """The ``shell`` controller the navbar's home button targets.

    Added at freeze time only when the application registers no ``shell``
    controller of its own.
    """

    @action
    def index(self) -> Page:
        return self.create_page(ShellHome, title=self.shell.config.title)


def compile_controllers(
    pending: list[type[ElementsController]],
    providers: Mapping[type, Provider],
    *,
    defaults: list[type[ElementsController]] | None = None,
) -> ControllerRegistry:
    """Compile registered controller classes into a ControllerRegistry.

    Called during ``App._freeze()``. *defaults* are added only when no
    pending controller already uses their name. Collaborator resolution
    happens here so a collaborator without a provider fails at startup
    with ``ConfigurationError``.
    """
    definitions: list[ControllerDef] = []
    seen_names: set[str] = set()

    for cls in pending:
        if cls.name in seen_names:
            msg = f"Duplicate controller name: {cls.name!r}"
            raise ConfigurationError(msg)
        seen_names.add(cls.name)
        definitions.append(ControllerDef(cls.name, cls, _collaborators(cls, providers)))

    for cls in defaults or ():
        if cls.name not in seen_names:
            seen_names.add(cls.name)
            definitions.append(ControllerDef(cls.name, cls, _collaborators(cls, providers)))

    return ControllerRegistry(definitions, providers)
