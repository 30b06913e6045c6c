"""Render phase — component trees to markup.

The template engine is a collaborator behind the ``Renderer`` protocol::

    render(view_path, model) -> markup

``render_tree()`` walks a tree bottom-up: a component's children are
rendered first, in order, and handed to its own template as ``children``
(id → markup) and ``body`` (all children concatenated). Renderer errors
propagate unmodified.

``KidaRenderer`` is the default collaborator, backed by a kida
``Environment`` built from ``AppConfig`` the way the app builds it at
freeze time.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader
from kida.template import Markup

from perch.elements.builtin import ShellNavbar
from perch.elements.tree import ComponentTree
from perch.errors import ConfigurationError

if TYPE_CHECKING:
    from perch.config import AppConfig
    from perch.elements.component import Component
    from perch.elements.kinds import KindRegistry
    from perch.shell import Shell


class Renderer(Protocol):
    """Template collaborator. Must be deterministic for a given input."""

    def render(self, view_path: str, model: Mapping[str, Any]) -> str: ...


@dataclass(frozen=True, slots=True)
class RenderedNode:
    """One component's markup, in the order it was produced."""

    path: str
    view_path: str
    markup: str


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Final markup plus every node rendered on the way (post-order)."""

    markup: str
    nodes: tuple[RenderedNode, ...] = ()

    def __str__(self) -> str:
        return self.markup


def render_component(
    component: Component,
    renderer: Renderer,
    nodes: list[RenderedNode],
) -> str:
    """Render *component* after its children. Appends to *nodes*."""
    children: dict[str, Markup] = {}
    for child in component.children:
        children[child.id] = Markup(render_component(child, renderer, nodes))

    template = component.template
    model = component.model()
    model["component"] = component
    model["children"] = children
    model["body"] = Markup("".join(children.values()))

    markup = renderer.render(template, model)
    nodes.append(RenderedNode(component.path, template, markup))
    return markup


def render_tree(root: Component, renderer: Renderer) -> RenderResult:
    """Render a whole tree. Children always precede their parent."""
    nodes: list[RenderedNode] = []
    markup = render_component(root, renderer, nodes)
    return RenderResult(markup, tuple(nodes))


def render_shell(shell: Shell, renderer: Renderer, kinds: KindRegistry) -> RenderResult:
    """Render the shell chrome around its active page.

    The navbar is built fresh for every render in its own tree; the page
    tree is rendered as it stands.

    Raises:
        ConfigurationError: The shell has no active page yet.
    """
    page = shell.content
    if page is None:
        msg = f"Shell {shell.session_id!r} has no active page to render"
        raise ConfigurationError(msg)

    navbar = ComponentTree(kinds).create(ShellNavbar, args={"shell": shell})
    nodes: list[RenderedNode] = []
    navbar_html = render_component(navbar, renderer, nodes)
    content_html = render_component(page, renderer, nodes)

    model = {
        "shell": shell,
        "title": shell.title,
        "navbar": Markup(navbar_html),
        "content": Markup(content_html),
        "user_menu": shell.user_menu,
        "features": shell.config.features,
    }
    markup = renderer.render(shell.config.template, model)
    nodes.append(RenderedNode(shell.session_id, shell.config.template, markup))
    return RenderResult(markup, tuple(nodes))


# -- kida --


def create_environment(
    config: AppConfig,
    filters: dict[str, Callable[..., Any]],
    globals_: dict[str, Any],
) -> Environment:
    """Create a kida Environment from app configuration.

    Called once during ``App._freeze()``. Application templates come
    first, then ``config.component_dirs``, then perch's built-in element
    templates, so an application can override any built-in view.
    """
    loaders = [FileSystemLoader(str(config.template_dir))]
    loaders.extend(FileSystemLoader(str(d)) for d in config.component_dirs)
    loaders.append(PackageLoader("perch", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    if filters:
        env.update_filters(filters)
    for name, value in globals_.items():
        env.add_global(name, value)
    return env


class KidaRenderer:
    """``Renderer`` backed by a kida Environment."""

    __slots__ = ("env",)

    def __init__(self, env: Environment) -> None:
        self.env = env

    def render(self, view_path: str, model: Mapping[str, Any]) -> str:
        template = self.env.get_template(view_path)
        return template.render(dict(model))
