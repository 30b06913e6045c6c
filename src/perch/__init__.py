"""Perch — server-rendered UI elements driven by controller events.

A persistent shell per session shows one page at a time. Pages are trees
of components built on the server; UI events are routed to controller
handlers, which either re-render the current page or redirect to another
controller action.

Basic usage::

    from perch import App, ElementsController, Page, on, action

    app = App()

    @app.controller
    class KeyPressController(ElementsController):
        @on("keyPress")
        def on_key_press(self):
            self.display()

        @action
        def index(self):
            return self.create_page(Page)
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "Button",
    "Component",
    "ConfigurationError",
    "ConstructionError",
    "Control",
    "ElementsController",
    "Features",
    "MenuItem",
    "NavigationError",
    "Page",
    "PerchError",
    "Route",
    "RoutingError",
    "Shell",
    "ShellConfig",
    "action",
    "display",
    "get_event",
    "on",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name in ("AppConfig", "Features", "MenuItem", "Route", "ShellConfig"):
        from perch import config as _config

        return getattr(_config, name)

    if name in ("Component", "Control"):
        from perch.elements import component as _component

        return getattr(_component, name)

    if name == "Page":
        from perch.elements.page import Page

        return Page

    if name == "Button":
        from perch.elements.builtin import Button

        return Button

    if name in ("ElementsController", "action", "on"):
        from perch import controllers as _controllers

        return getattr(_controllers, name)

    if name == "Shell":
        from perch.shell import Shell

        return Shell

    if name == "display":
        from perch.navigation import display

        return display

    if name == "get_event":
        from perch.context import get_event

        return get_event

    if name in (
        "ConfigurationError",
        "ConstructionError",
        "NavigationError",
        "PerchError",
        "RoutingError",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
