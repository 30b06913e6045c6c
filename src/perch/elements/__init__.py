"""Server-rendered UI elements.

Components form a tree per page, built by the element factory from
registered kinds::

    from perch.elements import Header, Page

    @app.component(view_path="custom/")
    class CustomPage(Page):
        slots = ("header", "content")

        def build(self) -> None:
            self.header = self.create_component(Header, title="Key press")
"""

from perch.elements.builtin import Button, ContentBlank, Header, ShellHome, ShellNavbar
from perch.elements.component import Component, Control
from perch.elements.kinds import KindDef, KindRegistry
from perch.elements.page import Page, build_page
from perch.elements.tree import ComponentTree

__all__ = [
    "Button",
    "Component",
    "ComponentTree",
    "ContentBlank",
    "Control",
    "Header",
    "KindDef",
    "KindRegistry",
    "Page",
    "ShellHome",
    "ShellNavbar",
    "build_page",
]
