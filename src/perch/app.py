"""Perch application class.

Mutable during setup (kinds, controllers, providers, template filters).
Frozen at runtime when the first shell is opened or the first event is
dispatched.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment

from perch._internal.types import Provider
from perch.config import AppConfig, Route
from perch.controllers import (
    ControllerRegistry,
    ElementsController,
    ShellController,
    compile_controllers,
)
from perch.dispatch import Event, EventDispatcher
from perch.elements.builtin import register_builtin_kinds
from perch.elements.component import Component
from perch.elements.kinds import KindRegistry
from perch.elements.page import Page
from perch.errors import ConfigurationError, RoutingError
from perch.navigation import Outcome
from perch.rendering import (
    KidaRenderer,
    Renderer,
    RenderResult,
    create_environment,
    render_shell,
    render_tree,
)
from perch.shell import Shell, ShellStore

logger = logging.getLogger("perch.app")


class App:
    """The perch application.

    Mutable during setup (decorators at import time). Frozen at runtime
    by ``_ensure_frozen()``.

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread compiles the app, even
        when several sessions open their first shell at once.
    """

    __slots__ = (
        "_controllers",
        "_custom_kida_env",
        "_custom_renderer",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_kinds",
        "_pending_controllers",
        "_providers",
        "_renderer",
        "_shells",
        "_template_filters",
        "_template_globals",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        kida_env: Environment | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._kinds = KindRegistry(
            view_dir=self.config.view_dir,
            view_suffix=self.config.view_suffix,
        )
        self._pending_controllers: list[type[ElementsController]] = []
        self._providers: dict[type, Provider] = {}
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env
        self._custom_renderer: Renderer | None = renderer
        self._shells = ShellStore(lambda session_id: Shell(session_id, self.config.shell))

        # Compiled state, set during _freeze()
        self._controllers: ControllerRegistry | None = None
        self._dispatcher: EventDispatcher | None = None
        self._kida_env: Environment | None = None
        self._renderer: Renderer | None = None

    # -- Kind registration --

    def component(
        self,
        name: str | None = None,
        *,
        view_path: str | None = None,
        required: tuple[str, ...] = (),
        options: type | None = None,
    ) -> Callable[[type[Component]], type[Component]]:
        """Register a component or page kind via decorator.

        Args:
            name: Kind name. Defaults to the class name.
            view_path: Default template, or a directory ending in ``/``.
                Defaults to ``config.view_dir``.
            required: Mandatory construction arguments.
            options: Frozen dataclass built from the arguments; its
                fields without defaults are mandatory as well.

        Usage::

            @app.component(view_path="custom/")
            class CustomPage(Page):
                def build(self) -> None:
                    self.header = self.create_component(Header)
        """

        def decorator(cls: type[Component]) -> type[Component]:
            self._check_not_frozen()
            self._kinds.register(
                cls,
                name=name,
                view_path=view_path,
                required=required,
                options=options,
            )
            return cls

        return decorator

    # -- Controller registration --

    def controller(self, cls: type[ElementsController]) -> type[ElementsController]:
        """Register a controller class via decorator.

        Usage::

            @app.controller
            class KeyPressController(ElementsController):
                ...
        """
        self._check_not_frozen()
        if not (isinstance(cls, type) and issubclass(cls, ElementsController)):
            msg = f"{cls!r} is not an ElementsController subclass"
            raise TypeError(msg)
        self._pending_controllers.append(cls)
        return cls

    # -- Service injection --

    def provide(self, annotation: type, factory: Provider) -> None:
        """Register a provider factory for collaborator injection.

        Every controller attribute annotated with *annotation* is set
        from ``factory()`` before the controller handles anything::

            app.provide(SecurityService, lambda: directory)

            class KeyPressController(ElementsController):
                security: SecurityService
        """
        self._check_not_frozen()
        self._providers[annotation] = factory

    # -- Template integration --

    def template_filter(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida template filter."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_filters[name or func.__name__] = func
            return func

        return decorator

    def template_global(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida template global."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_globals[name or func.__name__] = func
            return func

        return decorator

    # -- Sessions --

    def open_shell(self, session_id: str) -> Shell:
        """Return the session's shell, creating it on first use."""
        self._ensure_frozen()
        shell, _ = self._shells.open(session_id)
        return shell

    def shell(self, session_id: str) -> Shell:
        """Return an open shell. Raises ``SessionNotFound`` otherwise."""
        return self._shells.get(session_id)

    def close_shell(self, session_id: str) -> bool:
        """Tear down a session's shell and everything it displays."""
        return self._shells.close(session_id)

    # -- Navigation and events --

    async def navigate(
        self,
        session_id: str,
        controller: str | None = None,
        action: str | None = None,
        **params: Any,
    ) -> Page:
        """Display ``controller/action`` in the session's shell.

        Without a controller, an action belongs to the active page's
        controller; with neither, navigates to the configured home route.

        Raises:
            RoutingError: An action was given but the shell has no page.
        """
        self._ensure_frozen()
        assert self._dispatcher is not None
        shell = self._shells.get(session_id)
        if controller is None and action is not None:
            if shell.content is None:
                msg = f"Cannot navigate to action {action!r}: shell {session_id!r} has no page"
                raise RoutingError(msg)
            controller = shell.content.route.controller
        target = Route(controller, action or "index") if controller else self.config.shell.home
        return await self._dispatcher.navigate(shell, target, params)

    async def dispatch(
        self,
        session_id: str,
        event: str,
        payload: Mapping[str, Any] | None = None,
        *,
        controller: str | None = None,
    ) -> Outcome:
        """Route a UI event to its handler and apply the navigation outcome."""
        self._ensure_frozen()
        assert self._dispatcher is not None
        shell = self._shells.get(session_id)
        return await self._dispatcher.dispatch(
            shell, Event(event, dict(payload or {}), controller)
        )

    # -- Rendering --

    def render(self, session_id: str) -> str:
        """Render the full shell (chrome + active page) for a session."""
        self._ensure_frozen()
        assert self._renderer is not None
        shell = self._shells.get(session_id)
        return render_shell(shell, self._renderer, self._kinds).markup

    def render_page(self, session_id: str) -> RenderResult:
        """Render only the active page tree, e.g. for a partial refresh."""
        self._ensure_frozen()
        assert self._renderer is not None
        shell = self._shells.get(session_id)
        page = shell.content
        if page is None:
            msg = f"Shell {session_id!r} has no active page to render"
            raise ConfigurationError(msg)
        return render_tree(page, self._renderer)

    # -- Introspection --

    @property
    def kinds(self) -> KindRegistry:
        return self._kinds

    @property
    def controllers(self) -> ControllerRegistry:
        """The compiled controller table. Freezes the app if needed."""
        self._ensure_frozen()
        assert self._controllers is not None
        return self._controllers

    @property
    def kida_env(self) -> Environment | None:
        """The kida environment, or ``None`` when a custom renderer is used."""
        self._ensure_frozen()
        return self._kida_env

    def check(self) -> None:
        """Validate kinds, templates and the home route, and print results.

        Raises ``SystemExit(1)`` if errors are found.
        """
        from perch.contracts import check_elements

        result = check_elements(self)
        print(result.summary())
        if not result.ok:
            raise SystemExit(1)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Kind table: built-ins fill in whatever the app did not define
        register_builtin_kinds(self._kinds)
        self._kinds.freeze()

        # 2. Controller table (collaborator resolution happens here)
        self._controllers = compile_controllers(
            self._pending_controllers,
            self._providers,
            defaults=[ShellController],
        )

        # 3. Renderer: custom collaborator, custom kida env, or one from config
        if self._custom_renderer is not None:
            self._renderer = self._custom_renderer
            self._kida_env = self._custom_kida_env
        else:
            if self._custom_kida_env is not None:
                self._kida_env = self._custom_kida_env
                if self._template_filters:
                    self._kida_env.update_filters(self._template_filters)
                for name, value in self._template_globals.items():
                    self._kida_env.add_global(name, value)
            else:
                self._kida_env = create_environment(
                    self.config,
                    self._template_filters,
                    self._template_globals,
                )
            self._renderer = KidaRenderer(self._kida_env)

        self._dispatcher = EventDispatcher(self._controllers, self._kinds)
        self._frozen = True
        logger.debug(
            "app frozen: %d kinds, %d controllers", len(self._kinds), len(self._controllers)
        )

        # 4. In debug or development mode, surface broken views and routes
        #    at startup. Warnings only, never blocks startup.
        if self.config.debug or self.config.is_development:
            self._run_debug_checks()

    def _run_debug_checks(self) -> None:
        from perch.contracts import Severity, check_elements

        result = check_elements(self)
        for issue in result.issues:
            if issue.severity is Severity.INFO:
                continue
            logger.warning("%s: %s", issue.severity.value, issue.message)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started handling sessions. "
                "Register kinds, controllers and providers before opening a shell."
            )
            raise ConfigurationError(msg)
