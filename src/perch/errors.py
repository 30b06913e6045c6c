"""Perch exception hierarchy.

Shared across the element factory, dispatcher, navigation director and
App so every module raises and catches the same types.

Nothing in perch catches these on the way up: construction, routing and
navigation errors abort the current cycle and surface to whatever request
boundary sits above the runtime.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when app or element setup is invalid.

    Typically caught during ``App._freeze()`` at startup, or when a class
    declares two handlers for the same event.
    """


# -- Construction --


class ConstructionError(PerchError):
    """A component could not be created. No partial tree survives it."""


class ArgsException(ConstructionError):  # noqa: N818
    """A mandatory construction argument is missing or ``None``."""

    def __init__(self, name: str, component: str = "") -> None:
        self.name = name
        self.component = component
        where = f" for {component!r}" if component else ""
        super().__init__(f"Missing required argument {name!r}{where}")


class DuplicateComponentError(ConstructionError):
    """Two children of the same parent would share an id."""

    def __init__(self, component_id: str, parent: str) -> None:
        self.component_id = component_id
        self.parent = parent
        super().__init__(f"Component {parent!r} already has a child with id {component_id!r}")


# -- Routing --


class RoutingError(PerchError):
    """An event or navigation target could not be resolved."""


class HandlerNotFound(RoutingError):  # noqa: N818
    """The controller has no handler registered for the event."""

    def __init__(self, event: str, controller: str) -> None:
        self.event = event
        self.controller = controller
        super().__init__(f"Controller {controller!r} has no handler for event {event!r}")


class UnknownTarget(RoutingError):  # noqa: N818
    """A controller or action name does not resolve."""

    def __init__(self, controller: str, action: str | None = None) -> None:
        self.controller = controller
        self.action = action
        if action is None:
            msg = f"Unknown controller {controller!r}"
        else:
            msg = f"Unknown action {controller}/{action}"
        super().__init__(msg)


# -- Navigation and sessions --


class NavigationError(PerchError):
    """``display()`` was called when no decision may be recorded."""


class ConcurrentEventError(PerchError):
    """An event arrived for a Shell that is already handling one."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Shell {session_id!r} is already handling an event")


class SessionNotFound(PerchError, LookupError):  # noqa: N818
    """No Shell is open for the session id."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"No shell open for session {session_id!r}")
