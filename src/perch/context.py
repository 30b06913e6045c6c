"""Event-scoped context via ContextVar.

Provides:
- ``event_var``: the ``EventContext`` of the event being dispatched.
- ``get_event()``: read it from anywhere inside a handler.

The dispatcher sets and resets it around every handler call. Accessing it
outside a dispatch raises ``LookupError``.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from collections.abc import Iterator, Mapping
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any


class EventContext(Mapping[str, Any]):
    """Read-only view of one event: its name and payload fields.

    Payload fields read like attributes or keys::

        key = event.keyPressed
        key = event["keyPressed"]

    ``name`` and ``controller`` are the event's own attributes; payload
    fields with those names are only reachable by key.
    """

    __slots__ = ("_payload", "controller", "name")

    def __init__(
        self,
        name: str,
        payload: Mapping[str, Any] | None = None,
        *,
        controller: str | None = None,
    ) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "controller", controller)
        object.__setattr__(self, "_payload", MappingProxyType(dict(payload or {})))

    def __getitem__(self, key: str) -> Any:
        return self._payload[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._payload)

    def __len__(self) -> int:
        return len(self._payload)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._payload[name]
        except KeyError:
            msg = f"Event {self.name!r} has no field {name!r}"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        msg = "EventContext is read-only"
        raise AttributeError(msg)

    def __repr__(self) -> str:
        return f"<EventContext {self.name!r} {dict(self._payload)!r}>"


event_var: ContextVar[EventContext] = ContextVar("perch_event")
"""The current event. Set by the dispatcher before the handler runs."""


def get_event() -> EventContext:
    """Return the event being dispatched.

    Raises ``LookupError`` if called outside an event handler.
    """
    return event_var.get()
