"""Argument validation for the element factory.

Every component kind declares which construction arguments are
mandatory. The factory calls ``validate_arguments()`` once, before the
component object exists, so a component with a missing argument is never
observable::

    navbar = self.create_component(ShellNavbar, shell=shell)   # ok
    navbar = self.create_component(ShellNavbar)                # ArgsException

Kinds that want typed access declare a frozen options dataclass. Its
fields without defaults are mandatory too::

    @dataclass(frozen=True, slots=True)
    class ButtonOptions:
        controller: str = ""
        text: str = ""
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from perch.errors import ArgsException, ConstructionError

if TYPE_CHECKING:
    from perch.elements.kinds import KindDef


def require_argument(args: Mapping[str, Any], name: str, *, component: str = "") -> Any:
    """Return ``args[name]``, or raise ``ArgsException`` if missing or ``None``.

    Never substitutes a default.
    """
    value = args.get(name)
    if value is None:
        raise ArgsException(name, component)
    return value


def required_fields(options: type) -> tuple[str, ...]:
    """Names of the options dataclass fields that have no default."""
    return tuple(
        f.name
        for f in dataclasses.fields(options)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    )


def validate_arguments(
    kind: KindDef,
    args: Mapping[str, Any],
) -> tuple[Mapping[str, Any], Any]:
    """Validate an argument bag against a kind's contract.

    Returns the frozen bag (unknown keys kept, opaque) and the typed
    options instance, or ``None`` when the kind declares no options.

    Raises:
        ArgsException: A required argument is missing or ``None``.
        ConstructionError: The options dataclass rejected the values.
    """
    bag = dict(args)
    for name in kind.required:
        require_argument(bag, name, component=kind.name)

    options = None
    if kind.options is not None:
        names = {f.name for f in dataclasses.fields(kind.options) if f.init}
        try:
            options = kind.options(**{k: v for k, v in bag.items() if k in names})
        except (TypeError, ValueError) as exc:
            msg = f"Invalid arguments for {kind.name!r}: {exc}"
            raise ConstructionError(msg) from exc

    return MappingProxyType(bag), options
