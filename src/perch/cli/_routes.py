"""``perch routes`` — list controllers with their actions and events."""

import argparse
import sys

from perch.cli._resolve import resolve_app


def run_routes(args: argparse.Namespace) -> None:
    """Print one row per action and per event handler.

    Columns are KIND (``action`` or ``event``), TARGET (``controller/action``
    or ``controller:event``) and HANDLER (the method name).
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str]] = []
    for definition in sorted(app.controllers, key=lambda d: d.name):
        for name, func in sorted(definition.actions.items()):
            rows.append(("action", f"{definition.name}/{name}", func.__name__))
        for name, func in sorted(definition.events.items()):
            rows.append(("event", f"{definition.name}:{name}", func.__name__))

    if not rows:
        print("No routes registered.")
        return

    max_kind = max(6, *(len(r[0]) for r in rows))
    max_target = max(6, *(len(r[1]) for r in rows))

    fmt = f"{{:<{max_kind}}}  {{:<{max_target}}}  {{}}"
    print(fmt.format("KIND", "TARGET", "HANDLER"))
    sep_len = max_kind + max_target + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for kind, target, handler in rows:
        print(fmt.format(kind, target, handler))
