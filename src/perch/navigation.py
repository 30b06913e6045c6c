"""Navigation director — one navigation decision per event.

Each Shell owns a director. For every event the dispatcher walks it
through::

    IDLE ──begin()──▶ DISPATCHED ──display()──────────▶ RERENDER
                              │  └─finish() (no call)──▶ RERENDER
                              └──display(c, a)────────▶ REDIRECT

``RERENDER`` and ``REDIRECT`` are terminal for the event; the next
``begin()`` starts a fresh cycle. Only the first ``display()`` of an
event counts; a second one raises ``NavigationError`` and leaves the
first decision in place.

Handlers reach the in-flight director through ``display()`` in this
module (or ``ElementsController.display``), which reads it from a
ContextVar set by the dispatcher.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from perch.config import Route
from perch.errors import NavigationError

if TYPE_CHECKING:
    from perch.elements.page import Page

logger = logging.getLogger("perch.navigation")


class NavState(Enum):
    IDLE = "idle"
    DISPATCHED = "dispatched"
    RERENDER = "rerender"
    REDIRECT = "redirect"


@dataclass(frozen=True, slots=True)
class Outcome:
    """What one event decided.

    Attributes:
        state: ``RERENDER`` or ``REDIRECT``.
        target: The redirect route, ``None`` for a re-render.
        params: Keyword arguments for the target action.
        explicit: Whether the handler called ``display()`` at all.
            A handler that returns without calling it re-renders too.
        page: The shell's page once the outcome was applied.
    """

    state: NavState
    target: Route | None = None
    params: dict[str, Any] = field(default_factory=dict)
    explicit: bool = False
    page: Page | None = None

    @property
    def is_redirect(self) -> bool:
        return self.state is NavState.REDIRECT


class NavigationDirector:
    """Per-shell navigation state machine."""

    __slots__ = ("_current", "_decision", "_state")

    def __init__(self) -> None:
        self._state = NavState.IDLE
        self._decision: Outcome | None = None
        self._current: Route | None = None

    @property
    def state(self) -> NavState:
        return self._state

    def begin(self, current: Route | None = None) -> None:
        """Start handling an event.

        *current* is the route of the controller handling it; an
        action-only ``display()`` redirects within that controller.
        """
        if self._state is NavState.DISPATCHED:
            msg = "An event is already being dispatched"
            raise NavigationError(msg)
        self._state = NavState.DISPATCHED
        self._decision = None
        self._current = current

    def display(
        self,
        controller: str | None = None,
        action: str | None = None,
        **params: Any,
    ) -> None:
        """Record the navigation decision for the in-flight event.

        With no target, re-render the current page. With a target,
        redirect: a controller alone means its ``index`` action, an action
        alone means the handling controller. Parameters only travel with a
        redirect; a re-render keeps the current page as it is.
        """
        if self._state is not NavState.DISPATCHED:
            msg = f"display() called while navigation is {self._state.value}"
            raise NavigationError(msg)
        if self._decision is not None:
            msg = f"display() already called for this event ({self._decision.state.value})"
            raise NavigationError(msg)

        if controller is None and action is None:
            if params:
                msg = f"display() without a target takes no parameters, got {sorted(params)}"
                raise NavigationError(msg)
            self._decision = Outcome(NavState.RERENDER, explicit=True)
            logger.debug("display(): re-render")
            return

        if controller is None:
            if self._current is None:
                msg = f"display(action={action!r}) needs a current controller"
                raise NavigationError(msg)
            controller = self._current.controller
        target = Route(controller, action or "index")
        self._decision = Outcome(NavState.REDIRECT, target=target, params=params, explicit=True)
        logger.debug("display(): redirect to %s", target)

    def finish(self) -> Outcome:
        """Close the event and return its outcome."""
        if self._state is not NavState.DISPATCHED:
            msg = f"finish() called while navigation is {self._state.value}"
            raise NavigationError(msg)
        outcome = self._decision or Outcome(NavState.RERENDER)
        self._state = outcome.state
        self._decision = None
        return outcome

    def abort(self) -> None:
        """Drop the in-flight event after a handler failure."""
        self._state = NavState.IDLE
        self._decision = None
        self._current = None


# -- Handler-facing access --

director_var: ContextVar[NavigationDirector] = ContextVar("perch_director")
"""The director of the event being dispatched. Set by the dispatcher."""


def display(controller: str | None = None, action: str | None = None, **params: Any) -> None:
    """Record a navigation decision for the current event.

    Raises ``NavigationError`` if called outside an event handler.
    """
    try:
        director = director_var.get()
    except LookupError:
        msg = "display() called outside of event dispatch"
        raise NavigationError(msg) from None
    director.display(controller, action, **params)
