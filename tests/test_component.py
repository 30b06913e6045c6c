"""Tests for perch.elements.component and perch.elements.tree — the element factory."""

import pytest

from perch.config import Route
from perch.elements.builtin import Button, ButtonOptions, ContentBlank, Header
from perch.elements.component import Control
from perch.elements.kinds import KindRegistry
from perch.elements.page import Page, build_page
from perch.elements.tree import default_id
from perch.errors import (
    ArgsException,
    ConfigurationError,
    ConstructionError,
    DuplicateComponentError,
)


def _page(kinds: KindRegistry, kind: str = "BlankPage", **args) -> Page:
    return build_page(kinds, kind, Route("test"), args)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestIds:
    def test_default_id(self) -> None:
        assert default_id("ContentBlank") == "contentBlank"
        assert default_id("Header") == "header"

    def test_page_default_id(self, kinds: KindRegistry) -> None:
        assert _page(kinds).id == "blankPage"

    def test_repeated_default_ids_are_numbered(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        ids = [page.create_component("Panel").id for _ in range(3)]
        assert ids == ["panel", "panel2", "panel3"]

    def test_duplicate_explicit_id(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        page.create_component("Panel", "main")
        with pytest.raises(DuplicateComponentError):
            page.create_component(ContentBlank, "main")
        assert [c.id for c in page.children] == ["main"]
        assert len(page.tree) == 2

    def test_same_id_under_different_parents(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        left = page.create_component("Panel", "left")
        right = page.create_component("Panel", "right")
        assert left.create_component(Header).id == right.create_component(Header).id

    def test_empty_id_rejected(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ConstructionError):
            page.create_component("Panel", "")

    def test_path(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        header = page.create_component("Panel", "top").create_component(Header)
        assert header.path == "blankPage.top.header"


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


class TestArguments:
    def test_missing_required_argument(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ArgsException) as exc_info:
            page.create_component("ShellNavbar")
        assert exc_info.value.name == "shell"
        assert page.children == ()
        assert len(page.tree) == 1

    def test_options_required_field(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ArgsException) as exc_info:
            page.create_component("Badge", owner="me")
        assert exc_info.value.name == "label"

    def test_options_invalid_value(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ConstructionError, match="unknown tone"):
            page.create_component("Badge", owner="me", label="New", tone="loud")
        assert page.children == ()

    def test_options_and_unknown_args(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        header = page.create_component(Header, title="Welcome", color="red")
        assert header.options.title == "Welcome"
        assert header.options.icon == ""
        assert header.args["color"] == "red"

    def test_keywords_override_args_mapping(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        header = page.create_component(Header, None, {"title": "a"}, title="b")
        assert header.options.title == "b"


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------


class TestChildren:
    def test_insertion_order(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        for cid in ("c", "a", "b"):
            page.create_component("Panel", cid)
        assert [c.id for c in page.children] == ["c", "a", "b"]

    def test_declared_slots_order(self, kinds: KindRegistry) -> None:
        page = _page(kinds, "CustomPage")
        assert [c.id for c in page.children] == ["header", "content"]
        assert page.header is page["header"]
        assert page.content.kind == "ContentBlank"

    def test_lookup(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        panel = page.create_component("Panel", "main")
        assert page.get("main") is panel
        assert "main" in page
        assert page.get("other") is None
        assert panel.owner is page
        assert page.owner is None
        with pytest.raises(KeyError):
            page["other"]

    def test_remove_component(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        panel = page.create_component("Panel", "main")
        panel.create_component(Header)
        page.create_component("Panel", "side")
        page.remove_component("main")
        assert [c.id for c in page.children] == ["side"]
        assert len(page.tree) == 2
        assert panel not in page.tree

    def test_removed_slot_can_be_refilled_in_place(self, kinds: KindRegistry) -> None:
        page = _page(kinds, "CustomPage")
        page.remove_component("header")
        assert [c.id for c in page.children] == ["content"]
        page.create_component(Header, "header", title="Again")
        assert [c.id for c in page.children] == ["header", "content"]

    def test_build_failure_rolls_back(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(RuntimeError, match="build failed"):
            page.create_component("BrokenPanel")
        assert page.children == ()
        assert len(page.tree) == 1
        assert "brokenPanel" not in page

    def test_failed_page_build_propagates(self, kinds: KindRegistry) -> None:
        with pytest.raises(RuntimeError):
            _page(kinds, "BrokenPage")

    def test_page_cannot_be_a_child(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ConstructionError, match="page kind"):
            page.create_component("BlankPage")

    def test_second_root_rejected(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ConstructionError, match="already has a root"):
            page.tree.create("Panel")

    def test_foreign_parent_rejected(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        other = _page(kinds)
        with pytest.raises(ConstructionError, match="does not belong"):
            page.tree.create("Panel", parent=other)

    def test_walk_is_post_order(self, kinds: KindRegistry) -> None:
        page = _page(kinds, "CustomPage")
        assert [c.id for c in page.tree.walk(page.key)] == ["header", "content", "customPage"]
        assert page.tree.root is page


# ---------------------------------------------------------------------------
# Controls
# ---------------------------------------------------------------------------


class TestControls:
    def test_create_control_from_mapping(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        button = page.create_control(
            {"class": Button, "id": "home", "controller": "shell", "icon": "fa-home", "text": ""}
        )
        assert isinstance(button, Control)
        assert button.id == "home"
        assert button.options == ButtonOptions(controller="shell", icon="fa-home")
        assert "class" not in button.args
        assert "id" not in button.args

    def test_kind_by_name(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        assert page.create_control(kind="Button").id == "button"

    def test_missing_class(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ArgsException) as exc_info:
            page.create_control({"id": "home"})
        assert exc_info.value.name == "class"

    def test_non_control_kind(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        with pytest.raises(ConstructionError, match="not a control"):
            page.create_control({"class": "Panel"})

    def test_control_is_a_leaf(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        button = page.create_control({"class": Button})
        with pytest.raises(ConstructionError, match="cannot own"):
            button.create_component(Header)


# ---------------------------------------------------------------------------
# View paths and models
# ---------------------------------------------------------------------------


class TestViewPath:
    def test_template_from_kind(self, kinds: KindRegistry) -> None:
        page = _page(kinds, "CustomPage")
        assert page.template == "custom/CustomPage.html"
        assert page.header.template == "elements/Header.html"

    def test_directory_set_by_instance(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        page.view_path = "alt/"
        assert page.template == "alt/BlankPage.html"

    def test_cleared_view_path(self, kinds: KindRegistry) -> None:
        page = _page(kinds)
        page.view_path = None
        with pytest.raises(ConfigurationError, match="no view path"):
            page.template

    def test_model(self, kinds: KindRegistry) -> None:
        page = _page(kinds, title="Home")
        panel = page.create_component("Panel", "main", extra=1)
        assert panel.model() == {
            "extra": 1,
            "id": "main",
            "path": "blankPage.main",
            "options": None,
        }
        model = page.model()
        assert model["title"] == "Home"
        assert model["route"] == Route("test", "index")


class TestPage:
    def test_bound_to_route(self, kinds: KindRegistry) -> None:
        page = build_page(kinds, "BlankPage", Route("keyPress"), {"title": "Keys"})
        assert page.route == Route("keyPress", "index")
        assert page.title == "Keys"

    def test_explicit_page_id(self, kinds: KindRegistry) -> None:
        page = build_page(kinds, "BlankPage", Route("keyPress"), page_id="keys")
        assert page.id == "keys"

    def test_non_page_kind_rejected(self, kinds: KindRegistry) -> None:
        with pytest.raises(ConstructionError, match="not a page kind"):
            build_page(kinds, "Panel", Route("keyPress"))

    def test_each_page_owns_its_tree(self, kinds: KindRegistry) -> None:
        first = _page(kinds)
        second = _page(kinds)
        assert first.tree is not second.tree
