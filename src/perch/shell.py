"""Shell — the session-scoped chrome around the active page.

A Shell is opened once per session and lives until the session is
closed. It owns:

- ``config``: a frozen ``ShellConfig``, read-only for the whole session;
- ``content``: the active ``Page``, swapped wholesale on navigation;
- ``director``: the navigation state machine for its events.

Events for one Shell never interleave. ``event_scope()`` takes a
non-blocking lock and rejects a second event that arrives while one is in
flight, instead of queueing it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from perch.config import MenuItem, ShellConfig
from perch.errors import ConcurrentEventError, SessionNotFound
from perch.navigation import NavigationDirector

if TYPE_CHECKING:
    from perch.elements.page import Page

logger = logging.getLogger("perch.shell")


class Shell:
    """Persistent wrapper holding the active page and global configuration."""

    __slots__ = ("_content", "_event_lock", "config", "director", "session_id")

    def __init__(self, session_id: str, config: ShellConfig | None = None) -> None:
        self.session_id = session_id
        self.config = config or ShellConfig()
        self.director = NavigationDirector()
        self._content: Page | None = None
        self._event_lock = threading.Lock()

    @property
    def content(self) -> Page | None:
        """The active page, or ``None`` before the first navigation."""
        return self._content

    def replace_content(self, page: Page) -> Page | None:
        """Install *page* as the active page. Returns the page it replaced."""
        previous, self._content = self._content, page
        logger.debug("shell %s: %s -> %s", self.session_id, _label(previous), _label(page))
        return previous

    # -- Chrome --

    @property
    def title(self) -> str:
        """Active page title, falling back to the configured title."""
        if self._content is not None and self._content.title:
            return self._content.title
        return self.config.title

    @property
    def user_menu(self) -> tuple[MenuItem, ...]:
        return self.config.features.user.items

    def has_feature(self, flag: str) -> bool:
        return flag in self.config.features.flags

    # -- Event serialization --

    @property
    def busy(self) -> bool:
        return self._event_lock.locked()

    @contextmanager
    def event_scope(self) -> Iterator[None]:
        """Hold the shell for one event.

        Raises ``ConcurrentEventError`` if another event holds it.
        """
        if not self._event_lock.acquire(blocking=False):
            raise ConcurrentEventError(self.session_id)
        try:
            yield
        finally:
            self._event_lock.release()

    def __repr__(self) -> str:
        return f"<Shell {self.session_id!r} content={_label(self._content)}>"


def _label(page: Page | None) -> str:
    if page is None:
        return "None"
    return f"{page.kind}@{page.route}"


class ShellStore:
    """Open shells by session id.

    Thread safety:
        A Lock protects the session map. Shell contents are not guarded
        here; each Shell serializes its own events.
    """

    __slots__ = ("_factory", "_lock", "_shells")

    def __init__(self, factory: Callable[[str], Shell] | None = None) -> None:
        self._shells: dict[str, Shell] = {}
        self._lock = threading.Lock()
        self._factory = factory or Shell

    def open(self, session_id: str) -> tuple[Shell, bool]:
        """Return the session's shell, creating it on first use.

        The second element is ``True`` when the shell was just created.
        """
        with self._lock:
            shell = self._shells.get(session_id)
            if shell is not None:
                return shell, False
            shell = self._factory(session_id)
            self._shells[session_id] = shell
        logger.info("shell opened for session %s", session_id)
        return shell, True

    def get(self, session_id: str) -> Shell:
        """Return an open shell. Raises ``SessionNotFound`` otherwise."""
        with self._lock:
            shell = self._shells.get(session_id)
        if shell is None:
            raise SessionNotFound(session_id)
        return shell

    def close(self, session_id: str) -> bool:
        """Tear down a session's shell. Returns ``False`` if none was open."""
        with self._lock:
            shell = self._shells.pop(session_id, None)
        if shell is None:
            return False
        logger.info("shell closed for session %s", session_id)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._shells)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._shells
