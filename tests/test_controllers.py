"""Tests for perch.controllers — event and action tables, compilation, injection."""

from typing import ClassVar

import pytest

from perch.config import Route
from perch.controllers import (
    ElementsController,
    ShellController,
    action,
    compile_controllers,
    controller_name,
    on,
)
from perch.errors import ConfigurationError
from perch.shell import Shell


class Directory:
    """Collaborator injected by annotation."""


class KeyPressController(ElementsController):
    directory: Directory
    label: str = ""

    @on("keyPress")
    def on_key_press(self) -> None:
        pass

    @on("focus", "blur")
    def on_focus_change(self) -> None:
        pass

    @action
    def index(self) -> None:
        pass

    @action("logout")
    def sign_out(self) -> None:
        pass


class TestControllerName:
    def test_strips_suffix(self) -> None:
        assert controller_name("KeyPressController") == "keyPress"

    def test_without_suffix(self) -> None:
        assert controller_name("Authentication") == "authentication"

    def test_class_attribute(self) -> None:
        assert KeyPressController.name == "keyPress"
        assert ShellController.name == "shell"

    def test_explicit_name(self) -> None:
        class Auth(ElementsController, name="authentication"):
            pass

        assert Auth.name == "authentication"


class TestTables:
    def test_events(self) -> None:
        assert set(KeyPressController.events) == {"keyPress", "focus", "blur"}
        assert KeyPressController.handler_for("keyPress") is KeyPressController.on_key_press
        assert KeyPressController.handler_for("blur") is KeyPressController.on_focus_change
        assert KeyPressController.handler_for("missing") is None

    def test_actions(self) -> None:
        assert set(KeyPressController.actions) == {"index", "logout"}
        assert KeyPressController.action_for("logout") is KeyPressController.sign_out

    def test_tables_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            KeyPressController.events["x"] = lambda self: None  # type: ignore[index]

    def test_subclass_overrides(self) -> None:
        class Loud(KeyPressController):
            @on("keyPress")
            def shout(self) -> None:
                pass

        assert Loud.handler_for("keyPress") is Loud.shout
        assert Loud.handler_for("focus") is KeyPressController.on_focus_change
        assert KeyPressController.handler_for("keyPress") is KeyPressController.on_key_press

    def test_duplicate_event_in_one_class(self) -> None:
        with pytest.raises(ConfigurationError, match="twice"):

            class Broken(ElementsController):
                @on("keyPress")
                def first(self) -> None:
                    pass

                @on("keyPress")
                def second(self) -> None:
                    pass

    def test_on_requires_events(self) -> None:
        with pytest.raises(ConfigurationError):
            on()

    def test_base_has_no_tables(self) -> None:
        assert dict(ElementsController.events) == {}
        assert dict(ElementsController.actions) == {}


class TestCompile:
    def test_duplicate_controller_name(self) -> None:
        class Other(ElementsController, name="keyPress"):
            pass

        with pytest.raises(ConfigurationError, match="Duplicate controller name"):
            compile_controllers([KeyPressController, Other], {Directory: Directory})

    def test_defaults_fill_gaps(self) -> None:
        registry = compile_controllers(
            [KeyPressController], {Directory: Directory}, defaults=[ShellController]
        )
        assert "shell" in registry
        assert len(registry) == 2

    def test_app_controller_shadows_default(self) -> None:
        class MyShell(ElementsController, name="shell"):
            pass

        registry = compile_controllers([MyShell], {}, defaults=[ShellController])
        assert registry.get("shell").cls is MyShell

    def test_collaborators_only_for_provided_types(self) -> None:
        registry = compile_controllers([KeyPressController], {Directory: Directory})
        definition = registry.get("keyPress")
        assert definition.collaborators == (("directory", Directory),)
        assert definition.events is KeyPressController.events

    def test_missing_provider_fails_at_compile(self) -> None:
        with pytest.raises(ConfigurationError, match="directory: Directory") as exc_info:
            compile_controllers([KeyPressController], {})
        assert "keyPress" in str(exc_info.value)

    def test_annotation_with_default_is_not_a_collaborator(self) -> None:
        class Settings(ElementsController):
            directory: Directory | None = None
            label: str = "settings"
            limit: ClassVar[int] = 3

        registry = compile_controllers([Settings], {})
        assert registry.get("settings").collaborators == ()

    def test_plain_controller_needs_no_providers(self) -> None:
        class Plain(ElementsController):
            @action
            def index(self) -> None:
                pass

        registry = compile_controllers([Plain], {})
        assert registry.get("plain").collaborators == ()


class TestInstantiate:
    def test_fresh_instance_with_injection(self, kinds) -> None:
        registry = compile_controllers([KeyPressController], {Directory: Directory})
        definition = registry.get("keyPress")
        shell = Shell("s1")
        first = registry.instantiate(definition, shell=shell, kinds=kinds, route=Route("keyPress"))
        second = registry.instantiate(definition, shell=shell, kinds=kinds, route=Route("keyPress"))
        assert first is not second
        assert isinstance(first.directory, Directory)
        assert first.directory is not second.directory
        assert first.shell is shell
        assert first.event is None

    def test_create_page_binds_route(self, kinds) -> None:
        registry = compile_controllers([], {}, defaults=[ShellController])
        definition = registry.get("shell")
        shell = Shell("s1")
        controller = registry.instantiate(
            definition, shell=shell, kinds=kinds, route=Route("shell", "index")
        )
        page = controller.index()
        assert page.kind == "ShellHome"
        assert page.route == Route("shell", "index")
        assert [c.id for c in page.children] == ["header", "content"]
