"""Built-in elements: header, content, button, navbar and the home page.

Templates live in the package (``perch/templates/elements/``) and are
found through kida's ``PackageLoader``. Applications override any of
them by registering a kind with the same name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from perch.elements.component import Component, Control
from perch.elements.page import Page

if TYPE_CHECKING:
    from perch.elements.kinds import KindRegistry
    from perch.shell import Shell


@dataclass(frozen=True, slots=True)
class ButtonOptions:
    """Presentation and target of a button. All optional, all opaque."""

    controller: str = ""
    action: str = ""
    event: str = ""
    icon: str = ""
    text: str = ""
    animate: str = ""


@dataclass(frozen=True, slots=True)
class HeaderOptions:
    title: str = ""
    icon: str = ""


class Header(Component):
    """Page header. Optional ``title`` and ``icon`` arguments."""

    options: HeaderOptions


class ContentBlank(Component):
    """Empty content region for pages that fill it themselves."""


class Button(Control):
    options: ButtonOptions


class ShellNavbar(Component):
    """Top bar of the shell, with a home button.

    Requires the ``shell`` argument.
    """

    home: Button

    def build(self) -> None:
        self.shell: Shell = self.args["shell"]
        self.home = self.create_control(
            {
                "class": Button,
                "id": "home",
                "controller": "shell",
                "icon": "fa-solid fa-home",
                "text": "",
                "animate": "fade",
            }
        )

    def model(self) -> dict[str, Any]:
        ctx = super().model()
        ctx["title"] = self.shell.title
        ctx["user_menu"] = self.shell.user_menu
        return ctx


class ShellHome(Page):
    """Default landing page of the ``shell`` controller."""

    slots = ("header", "content")

    def build(self) -> None:
        self.header = self.create_component(Header, title=self.title)
        self.content = self.create_component(ContentBlank, "content")


def register_builtin_kinds(kinds: KindRegistry) -> None:
    """Add the built-in kinds; kinds already registered by the app win."""
    kinds.register(Header, options=HeaderOptions, builtin=True)
    kinds.register(ContentBlank, builtin=True)
    kinds.register(Button, options=ButtonOptions, builtin=True)
    kinds.register(ShellNavbar, view_path="shell/", required=("shell",), builtin=True)
    kinds.register(ShellHome, builtin=True)

