"""Test client for perch applications.

Drives a real Shell through the same dispatcher and renderer as
production. No transport is involved: events go straight to
``App.dispatch()``.
"""

import itertools
from typing import Any

from perch.app import App
from perch.elements.page import Page
from perch.navigation import NavState, Outcome
from perch.rendering import RenderResult
from perch.shell import Shell

_session_ids = itertools.count(1)


# ---------------------------------------------------------------------------
# Outcome assertion helpers
# ---------------------------------------------------------------------------


def assert_rerendered(outcome: Outcome, page: Page | None = None) -> None:
    """Assert the event kept the current page (optionally: this exact page)."""
    assert outcome.state is NavState.RERENDER, (
        f"Expected RERENDER, got {outcome.state.value} to {outcome.target}"
    )
    if page is not None:
        assert outcome.page is page, "Page identity changed on re-render"


def assert_redirected(outcome: Outcome, controller: str, action: str = "index") -> None:
    """Assert the event redirected to ``controller/action``."""
    assert outcome.state is NavState.REDIRECT, (
        f"Expected REDIRECT to {controller}/{action}, got {outcome.state.value}"
    )
    assert outcome.target is not None
    assert (outcome.target.controller, outcome.target.action) == (controller, action), (
        f"Expected redirect to {controller}/{action}, got {outcome.target}"
    )


class ShellClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client bound to one session's Shell.

    Opens the shell on enter (navigating to the home route unless
    ``navigate=False``) and closes it on exit.

    Usage::

        async with ShellClient(app) as client:
            outcome = await client.fire("keyPress", {"keyPressed": "42"})
            assert outcome.state is NavState.REDIRECT
    """

    __slots__ = ("_navigate", "app", "session_id")

    def __init__(self, app: App, session_id: str | None = None, *, navigate: bool = True) -> None:
        self.app = app
        self.session_id = session_id or f"test-session-{next(_session_ids)}"
        self._navigate = navigate

    async def __aenter__(self) -> ShellClient:
        self.app.open_shell(self.session_id)
        if self._navigate:
            await self.app.navigate(self.session_id)
        return self

    async def __aexit__(self, *args: object) -> None:
        self.app.close_shell(self.session_id)

    @property
    def shell(self) -> Shell:
        return self.app.shell(self.session_id)

    @property
    def page(self) -> Page | None:
        """The active page."""
        return self.shell.content

    async def goto(self, controller: str | None = None, action: str | None = None, **params: Any) -> Page:
        """Navigate to ``controller/action`` (the home route by default)."""
        return await self.app.navigate(self.session_id, controller, action, **params)

    async def fire(
        self,
        event: str,
        payload: dict[str, Any] | None = None,
        *,
        controller: str | None = None,
    ) -> Outcome:
        """Dispatch an event as the browser would."""
        return await self.app.dispatch(self.session_id, event, payload, controller=controller)

    def render(self) -> str:
        """Render the full shell."""
        return self.app.render(self.session_id)

    def render_page(self) -> RenderResult:
        """Render the active page tree only."""
        return self.app.render_page(self.session_id)
