"""Shared type aliases used across perch modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Event handler or action: an unbound controller method, sync or async
Handler: TypeAlias = Callable[..., Any]

# Zero-argument factory registered with ``App.provide()``
Provider: TypeAlias = Callable[[], Any]
