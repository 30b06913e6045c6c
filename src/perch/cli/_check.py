"""``perch check`` — element contract validation command.

Prints the check summary to stdout. Exits with code 1 if errors are found.
"""

import argparse
import sys

from perch.cli._resolve import resolve_app


def run_check(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and delegate to ``App.check()``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app.check()
