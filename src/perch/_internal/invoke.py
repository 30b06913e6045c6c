"""Invoke helpers — call sync or async callables uniformly.

Event handlers, actions and collaborator lookups can be ``def`` or
``async def``. Any code that calls a user-provided callable must handle
both cases; the sync/async check lives here and nowhere else.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(handler, controller)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        @on("keyPress")
        def on_key_press(self):
            self.display()

        # async: awaited in place
        @on("keyPress")
        async def on_key_press(self):
            user = await self.security.get_user_by_external_id(self.event.keyPressed)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
