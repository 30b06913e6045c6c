"""Event dispatcher — from a UI event to the next page.

For one event the dispatcher:

1. holds the shell (a concurrent event for the same shell is rejected);
2. resolves the controller: the event's own, else the active page's;
3. resolves the handler from the controller's event table;
4. creates the controller, injects collaborators, runs the handler with
   the event payload and the shell's navigation director in context;
5. applies the director's outcome: a re-render keeps the current page,
   a redirect builds the target page and swaps it into the shell.

No recovery happens here. Unknown events and targets raise routing
errors, handler and collaborator exceptions propagate unmodified, and a
redirect whose page fails to build leaves the shell on its old page.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from perch._internal.invoke import invoke
from perch.config import Route
from perch.context import EventContext, event_var
from perch.elements.page import Page
from perch.errors import ConstructionError, HandlerNotFound, RoutingError, UnknownTarget
from perch.navigation import Outcome, director_var

if TYPE_CHECKING:
    from perch.controllers import ControllerDef, ControllerRegistry
    from perch.elements.kinds import KindRegistry
    from perch.shell import Shell

logger = logging.getLogger("perch.dispatch")


@dataclass(frozen=True, slots=True)
class Event:
    """An inbound UI event.

    Attributes:
        name: Event name, matched against ``@on(...)`` registrations.
        payload: Event fields (e.g. ``keyPressed``), read-only to handlers.
        controller: Target controller; defaults to the active page's.
    """

    name: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    controller: str | None = None


class EventDispatcher:
    """Routes events to controller handlers and applies navigation."""

    __slots__ = ("controllers", "kinds")

    def __init__(self, controllers: ControllerRegistry, kinds: KindRegistry) -> None:
        self.controllers = controllers
        self.kinds = kinds

    async def dispatch(self, shell: Shell, event: Event) -> Outcome:
        """Handle one event for *shell* and return its outcome.

        Raises:
            ConcurrentEventError: The shell is handling another event.
            RoutingError: No controller, or no handler for the event.
        """
        with shell.event_scope():
            current = shell.content
            current_route = current.route if current is not None else None

            controller_name = event.controller or (current_route.controller if current_route else None)
            if controller_name is None:
                msg = f"Event {event.name!r} has no controller and the shell has no active page"
                raise RoutingError(msg)
            definition = self._resolve(controller_name)

            handler = definition.cls.handler_for(event.name)
            if handler is None:
                raise HandlerNotFound(event.name, controller_name)

            if current_route is not None and current_route.controller == controller_name:
                route = current_route
            else:
                route = Route(controller_name)
            ctx = EventContext(event.name, event.payload, controller=controller_name)
            controller = self.controllers.instantiate(
                definition, shell=shell, kinds=self.kinds, route=route, event=ctx
            )

            director = shell.director
            director.begin(route)
            event_token = event_var.set(ctx)
            director_token = director_var.set(director)
            logger.debug("dispatch %s -> %s.%s", event.name, controller_name, handler.__name__)
            try:
                await invoke(handler, controller)
                outcome = director.finish()
            except Exception:
                director.abort()
                raise
            finally:
                director_var.reset(director_token)
                event_var.reset(event_token)

            if outcome.target is not None:
                page = await self._build(shell, outcome.target, outcome.params)
                shell.replace_content(page)
            logger.debug("event %s: %s", event.name, outcome.state.value)
            return dataclasses.replace(outcome, page=shell.content)

    async def navigate(
        self,
        shell: Shell,
        target: Route,
        params: Mapping[str, Any] | None = None,
    ) -> Page:
        """Display ``target`` directly, outside of any event.

        Used for a shell's first page and for links that name a
        controller/action. The shell keeps its page if building fails.
        """
        with shell.event_scope():
            page = await self._build(shell, target, params or {})
            shell.replace_content(page)
            return page

    def _resolve(self, controller_name: str) -> ControllerDef:
        definition = self.controllers.get(controller_name)
        if definition is None:
            raise UnknownTarget(controller_name)
        return definition

    async def _build(self, shell: Shell, target: Route, params: Mapping[str, Any]) -> Page:
        definition = self._resolve(target.controller)
        action_fn = definition.cls.action_for(target.action)
        if action_fn is None:
            raise UnknownTarget(target.controller, target.action)

        controller = self.controllers.instantiate(
            definition, shell=shell, kinds=self.kinds, route=target
        )
        page = await invoke(action_fn, controller, **params)

        if not isinstance(page, Page):
            msg = f"Action {target} returned {type(page).__name__}, not a Page"
            raise ConstructionError(msg)
        if page is shell.content or page.route != target:
            msg = f"Action {target} must return a new page bound to {target}"
            raise ConstructionError(msg)
        return page
