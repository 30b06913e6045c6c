"""Security collaborator contract.

Perch does not authenticate anyone. Handlers that branch on the current
user declare a ``SecurityService`` collaborator and the application
provides an implementation::

    app.provide(SecurityService, lambda: directory)

    class KeyPressController(ElementsController):
        security: SecurityService
"""

from collections.abc import Awaitable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SecurityService(Protocol):
    """User lookup. Sync or async implementations are both accepted."""

    def get_user_by_external_id(self, external_id: str) -> Any | Awaitable[Any]:
        """Return the user with this external id, or ``None``."""
        ...
