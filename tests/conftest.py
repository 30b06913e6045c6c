"""Shared fixtures for perch tests.

Test kinds are registered by name so test modules can refer to them as
strings (``create_component("Panel")``) without importing this file.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pytest

from perch.elements.builtin import ContentBlank, Header, register_builtin_kinds
from perch.elements.component import Component
from perch.elements.kinds import KindRegistry
from perch.elements.page import Page


class TagRenderer:
    """Stub renderer returning ``"<" + view_path + ">"`` for every component."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def render(self, view_path: str, model: Mapping[str, Any]) -> str:
        self.calls.append((view_path, dict(model)))
        return f"<{view_path}>"


class NestingRenderer(TagRenderer):
    """Like TagRenderer, followed by the children's (or shell's) markup."""

    def render(self, view_path: str, model: Mapping[str, Any]) -> str:
        super().render(view_path, model)
        inner = "".join(str(model.get(k, "")) for k in ("body", "navbar", "content"))
        return f"<{view_path}>{inner}"


# ---------------------------------------------------------------------------
# Test kinds
# ---------------------------------------------------------------------------


class BlankPage(Page):
    """A page with no children."""


class CustomPage(Page):
    """Declares header before content but creates them the other way round."""

    slots = ("header", "content")

    def build(self) -> None:
        self.content = self.create_component(ContentBlank, "content")
        self.header = self.create_component(Header, title="Custom")


class Panel(Component):
    """A plain container."""


class BrokenPanel(Component):
    """Creates a child, then fails."""

    def build(self) -> None:
        self.create_component("Panel", "inner")
        raise RuntimeError("build failed")


class BrokenPage(Page):
    def build(self) -> None:
        self.create_component("BrokenPanel")


@dataclass(frozen=True, slots=True)
class BadgeOptions:
    label: str
    tone: str = "info"

    def __post_init__(self) -> None:
        if self.tone not in ("info", "warning"):
            raise ValueError(f"unknown tone {self.tone!r}")


class Badge(Component):
    options: BadgeOptions


def register_test_kinds(kinds: KindRegistry) -> None:
    kinds.register(BlankPage)
    kinds.register(CustomPage, view_path="/custom/")
    kinds.register(Panel)
    kinds.register(BrokenPanel)
    kinds.register(BrokenPage)
    kinds.register(Badge, required=("owner",), options=BadgeOptions)


@pytest.fixture
def kinds() -> KindRegistry:
    """A kind registry with the built-in and test kinds."""
    registry = KindRegistry()
    register_test_kinds(registry)
    register_builtin_kinds(registry)
    return registry


@pytest.fixture
def tag_renderer() -> TagRenderer:
    return TagRenderer()


@pytest.fixture
def nesting_renderer() -> NestingRenderer:
    return NestingRenderer()
