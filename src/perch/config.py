"""Application and shell configuration.

All configuration objects are frozen dataclasses: immutable after
creation, IDE-autocompletable, no string-key dict lookups. A Shell reads
its ``ShellConfig`` for the whole session and never writes to it, so it
is safe to share across concurrent sessions.
"""

from dataclasses import dataclass, field
from pathlib import Path

from perch.env import DEVELOPMENT, current_environment


@dataclass(frozen=True, slots=True)
class Route:
    """A ``controller/action`` pair. Pages are bound to exactly one."""

    controller: str
    action: str = "index"

    def __str__(self) -> str:
        return f"{self.controller}/{self.action}"


@dataclass(frozen=True, slots=True)
class MenuItem:
    """An extension entry in the shell's user menu."""

    label: str
    controller: str
    action: str = "index"
    icon: str = ""


@dataclass(frozen=True, slots=True)
class UserFeatures:
    items: tuple[MenuItem, ...] = ()


@dataclass(frozen=True, slots=True)
class Features:
    """Feature flags and menu extensions exposed to the shell template."""

    flags: frozenset[str] = frozenset()
    user: UserFeatures = field(default_factory=UserFeatures)


@dataclass(frozen=True, slots=True)
class ShellConfig:
    """Per-session chrome configuration. Loaded once, read-only after.

    ``title`` is the fallback when the active page has none. ``home`` is
    where a new shell navigates when nothing else is requested.
    """

    title: str = ""
    home: Route = field(default_factory=lambda: Route("shell", "index"))
    template: str = "shell/Shell.html"
    features: Features = field(default_factory=Features)


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, template_dir="views")
    """

    debug: bool = False
    environment: str = field(default_factory=current_environment)

    # Templates
    template_dir: str | Path = "templates"
    component_dirs: tuple[str | Path, ...] = ()  # Extra template directories (component libraries)
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Element view paths
    view_dir: str = "elements/"  # Default directory for registered kinds
    view_suffix: str = ".html"

    # Shell
    shell: ShellConfig = field(default_factory=ShellConfig)

    @property
    def is_development(self) -> bool:
        return self.environment == DEVELOPMENT
