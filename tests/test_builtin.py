"""Tests for perch.elements.builtin — navbar, home page and shell controller."""

import pytest

from perch.config import Route, ShellConfig
from perch.elements.builtin import Button, ShellNavbar
from perch.elements.kinds import KindRegistry
from perch.elements.tree import ComponentTree
from perch.errors import ArgsException
from perch.shell import Shell


class TestShellNavbar:
    def test_requires_shell(self, kinds: KindRegistry) -> None:
        with pytest.raises(ArgsException):
            ComponentTree(kinds).create(ShellNavbar)

    def test_home_button(self, kinds: KindRegistry) -> None:
        shell = Shell("s1", ShellConfig(title="Perch"))
        navbar = ComponentTree(kinds).create(ShellNavbar, args={"shell": shell})
        home = navbar["home"]
        assert isinstance(home, Button)
        assert navbar.home is home
        assert home.options.controller == "shell"
        assert home.options.icon == "fa-solid fa-home"
        assert navbar.template == "shell/ShellNavbar.html"

    def test_model_reads_shell(self, kinds: KindRegistry) -> None:
        shell = Shell("s1", ShellConfig(title="Perch"))
        navbar = ComponentTree(kinds).create(ShellNavbar, args={"shell": shell})
        model = navbar.model()
        assert model["title"] == "Perch"
        assert model["user_menu"] == ()


class TestShellHome:
    def test_header_and_content(self, kinds: KindRegistry) -> None:
        from perch.elements.page import build_page

        page = build_page(kinds, "ShellHome", Route("shell"), {"title": "Welcome"})
        assert [c.id for c in page.children] == ["header", "content"]
        assert page.header.options.title == "Welcome"
        assert page.template == "elements/ShellHome.html"
