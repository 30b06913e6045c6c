"""Element contracts — startup validation of views and routes.

Checks that the element surface is internally consistent before the
first session sees it: every registered kind has a loadable template,
the shell template exists, and the shell's home route names a
registered controller action.

Usage::

    # In development, validate on startup (App does this when debug=True):
    result = check_elements(app)
    for issue in result.issues:
        print(f"{issue.severity.value}: {issue.message}")

    # Or via CLI:
    #   perch check myapp:app
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from kida.environment.exceptions import TemplateNotFoundError

if TYPE_CHECKING:
    from kida import Environment

    from perch.app import App

# ---------------------------------------------------------------------------
# Issue types
# ---------------------------------------------------------------------------


class Severity(Enum):
    """Severity of a contract validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class ContractIssue:
    """A single validation issue found during contract checking."""

    severity: Severity
    category: str
    message: str
    template: str | None = None
    route: str | None = None
    details: str | None = None


@dataclass(slots=True)
class CheckResult:
    """Result of an element surface check."""

    issues: list[ContractIssue] = field(default_factory=list)
    kinds_checked: int = 0
    controllers_checked: int = 0
    templates_loaded: int = 0

    @property
    def errors(self) -> list[ContractIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ContractIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            f"Checked {self.kinds_checked} kinds, "
            f"{self.controllers_checked} controllers, "
            f"loaded {self.templates_loaded} templates.",
        ]
        if self.ok and not self.warnings:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for issue in self.issues:
            prefix = issue.severity.value.upper()
            loc = f" in {issue.template}" if issue.template else ""
            lines.append(f"  [{prefix}] {issue.message}{loc}")
            if issue.details:
                lines.append(f"           {issue.details}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _load(env: Environment, template: str) -> ContractIssue | None:
    """Try to load *template*; describe the failure, if any."""
    try:
        env.get_template(template)
    except TemplateNotFoundError:
        return ContractIssue(
            severity=Severity.ERROR,
            category="template",
            message=f"Template '{template}' was not found.",
            template=template,
        )
    except Exception as exc:
        return ContractIssue(
            severity=Severity.ERROR,
            category="template",
            message=f"Template '{template}' could not be loaded.",
            template=template,
            details=f"{type(exc).__name__}: {exc}",
        )
    return None


def check_elements(app: App) -> CheckResult:
    """Validate the element surface of a perch application.

    Checks:
    1. **Kind templates**: every registered kind's view path loads.
    2. **Shell template**: ``ShellConfig.template`` loads.
    3. **Home route**: the shell's home route names a registered
       controller and one of its actions.
    4. **Empty controllers**: a controller with neither event handlers
       nor actions can never be reached (warning).

    Template checks need the kida environment; with a custom renderer and
    no environment they are skipped (info).

    Args:
        app: A perch application. It is frozen if it is not already.

    Returns:
        CheckResult with issues and statistics.
    """
    result = CheckResult()
    app._ensure_frozen()
    env = app._kida_env

    # 1-2. Templates
    if env is None:
        result.issues.append(ContractIssue(
            severity=Severity.INFO,
            category="setup",
            message="No kida environment (custom renderer); template checks skipped.",
        ))
    else:
        templates = [(kind.name, kind.view_path) for kind in app.kinds]
        templates.append(("shell", app.config.shell.template))
        for owner, template in templates:
            issue = _load(env, template)
            if issue is None:
                result.templates_loaded += 1
                continue
            result.issues.append(
                ContractIssue(
                    severity=issue.severity,
                    category=issue.category,
                    message=f"{owner}: {issue.message}",
                    template=issue.template,
                    details=issue.details,
                )
            )
    result.kinds_checked = len(app.kinds)

    # 3. Home route
    controllers = app.controllers
    home = app.config.shell.home
    definition = controllers.get(home.controller)
    if definition is None:
        result.issues.append(ContractIssue(
            severity=Severity.ERROR,
            category="route",
            message=f"Home route '{home}' names unknown controller '{home.controller}'.",
            route=str(home),
        ))
    elif home.action not in definition.actions:
        result.issues.append(ContractIssue(
            severity=Severity.ERROR,
            category="route",
            message=f"Home route '{home}' names unknown action '{home.action}'.",
            route=str(home),
            details=f"Actions: {', '.join(sorted(definition.actions)) or '(none)'}",
        ))

    # 4. Controllers nothing can reach
    for definition in controllers:
        result.controllers_checked += 1
        if not definition.events and not definition.actions:
            result.issues.append(ContractIssue(
                severity=Severity.WARNING,
                category="controller",
                message=f"Controller '{definition.name}' has no event handlers and no actions.",
            ))

    return result
